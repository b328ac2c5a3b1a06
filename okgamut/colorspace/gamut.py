"""Gamut testing and mapping for out-of-gamut Oklab values.

Not all (L, a, b) combinations produce valid sRGB. High chroma at
extreme lightness is particularly problematic.

Policies:
- clip: Leave linear RGB as is; the 8-bit conversion clamps it later.
  Fast but desaturates and shifts hue slightly.
- bisect-chroma: Binary search on a chroma scale factor with L fixed.
- cone-clamp: Analytic rescale against a per-hue chroma limit that grows
  linearly with L. O(1) but only approximately in gamut.
"""

import logging
from math import pi
from typing import Iterator, Literal, NamedTuple, Optional, get_args

import numpy as np

from okgamut.defaults import (
    BISECT_ITERATIONS,
    CONE_CLAMP_RTOL,
    CHROMA_LUT_STEPS,
    CHROMA_SCAN_CELLS,
    CHROMA_SEARCH_MAX,
    CHROMA_SEARCH_STEPS,
    MAX_CHROMA_LH_STEPS,
    MAX_CHROMA_LH_UPPER,
)
from . import _backend as B
from ._backend import Array
from .errors import UnsupportedGamutPolicy
from .oklab import _oklab_to_linear_srgb, check_finite, oklch_to_oklab

logger = logging.getLogger(__name__)

GamutPolicy = Literal['clip', 'bisect-chroma', 'cone-clamp']
GAMUT_POLICIES: tuple[str, ...] = get_args(GamutPolicy)


class GamutResult(NamedTuple):
    """Linear sRGB after gamut mapping, plus whether the input was in gamut."""
    rgb: tuple[Array, Array, Array]
    in_gamut: Array


class BisectionStep(NamedTuple):
    """One midpoint evaluation of the chroma bisection.

    ``lower`` and ``upper`` are the bracket the midpoint ``scale`` was taken
    from; ``in_gamut`` is the test of ``rgb`` at that midpoint.
    """
    iteration: int
    lower: Array
    upper: Array
    scale: Array
    rgb: tuple[Array, Array, Array]
    in_gamut: Array


# === Gamut checking ===

def is_in_gamut(r: Array, g: Array, b: Array) -> Array:
    """Check if linear sRGB lies in the closed cube [0, 1]^3."""
    return (r >= 0) & (r <= 1) & (g >= 0) & (g <= 1) & (b >= 0) & (b <= 1)


def validate_policy(policy: str) -> None:
    if policy not in GAMUT_POLICIES:
        raise UnsupportedGamutPolicy(policy, GAMUT_POLICIES)


# === Gamut mapping methods ===

def clip_linear_srgb(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """Convert to linear sRGB without correction.

    Clipping is left to whoever quantizes the result (see to_8bit()).
    """
    check_finite(L, a, b)
    return _oklab_to_linear_srgb(L, a, b)


def iter_bisect_chroma(
    L: Array,
    a: Array,
    b: Array,
    iterations: int = BISECT_ITERATIONS,
) -> Iterator[BisectionStep]:
    """Bisect a chroma scale in [0, 1] for a fixed number of evaluations.

    ``lower`` always holds a scale that tested in gamut (or 0, which is gray)
    and ``upper`` one that did not (or the original color). The bracket is
    narrowed after every evaluation except the last one, whose midpoint is
    the final answer whether or not it tested in gamut.
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")
    check_finite(L, a, b)

    lower = B.zeros_like(L)
    upper = B.full_like(L, 1.0)
    for i in range(iterations):
        scale = (lower + upper) / 2
        rgb = _oklab_to_linear_srgb(L, scale * a, scale * b)
        valid = is_in_gamut(*rgb)
        yield BisectionStep(i, lower, upper, scale, rgb, valid)
        lower = B.where(valid, scale, lower)
        upper = B.where(valid, upper, scale)


def bisect_chroma(
    L: Array,
    a: Array,
    b: Array,
    iterations: int = BISECT_ITERATIONS,
) -> tuple[Array, Array, Array]:
    """Reduce chroma by bisection until (nearly) in gamut, preserving L and hue.

    The last midpoint is returned as is, so a result can still be marginally
    out of gamut; downstream clamping absorbs the residual.

    Returns:
        Linear sRGB triple. In-gamut inputs are returned unchanged.
    """
    check_finite(L, a, b)
    rgb = _oklab_to_linear_srgb(L, a, b)
    in_gamut = is_in_gamut(*rgb)
    if B.all(in_gamut):
        return rgb

    step = None
    for step in iter_bisect_chroma(L, a, b, iterations):
        pass
    return tuple(B.where(in_gamut, orig, mapped) for orig, mapped in zip(rgb, step.rgb))


def cone_clamp(
    L: Array,
    a: Array,
    b: Array,
    fast: bool = False,
    max_chroma: Optional[Array] = None,
) -> tuple[Array, Array, Array]:
    """Clamp chroma to the cone ``max_chroma_for_hue(hue) * L``.

    Colors at or inside the cone are returned unchanged. Chroma within
    CONE_CLAMP_RTOL of the limit counts as on it, so a color rebuilt from
    the limit through Oklch survives the atan2/sqrt round trip untouched.
    The cone is exact for the lower cube faces only, so bright saturated
    results can still exceed 1.

    Args:
        L, a, b: Oklab values
        fast: Use the per-degree lookup table instead of the exact search
        max_chroma: Precomputed limit at L=1 (scalar or per pixel). When given,
                    no search or lookup happens at all.

    Returns:
        (L, a, b) tuple with a and b scaled down where needed
    """
    check_finite(L, a, b)
    chroma = B.sqrt(a * a + b * b)
    if max_chroma is None:
        hue = B.atan2(b, a) * (180 / pi) % 360
        max_chroma = max_chroma_fast(hue) if fast else max_chroma_for_hue(hue)
    limit = B.maximum(max_chroma * L, B.zeros_like(chroma))

    over = chroma > limit * (1 + CONE_CLAMP_RTOL)
    # over implies chroma > 0, the placeholder only keeps 0/0 out of the math
    safe_chroma = B.where(over, chroma, B.full_like(chroma, 1.0))
    factor = B.where(over, limit / safe_chroma, B.full_like(chroma, 1.0))
    return L, a * factor, b * factor


def map_to_gamut(
    L: Array,
    a: Array,
    b: Array,
    policy: GamutPolicy = 'clip',
    max_chroma: Optional[Array] = None,
) -> GamutResult:
    """Map Oklab to linear sRGB with gamut handling.

    This is the main entry point for per-pixel evaluation.

    Args:
        L: Lightness (0-1)
        a, b: Oklab opponent axes
        policy: 'clip', 'bisect-chroma' or 'cone-clamp'
        max_chroma: Chroma limit at L=1 for cone-clamp, usually
                    max_chroma_for_hue() of a single hue. Defaults to the
                    per-degree LUT; the search never runs per pixel.

    Returns:
        GamutResult with the mapped linear RGB triple and the in-gamut test of
        the unmapped color (for overlays).

    Raises:
        UnsupportedGamutPolicy: If policy is not one of GAMUT_POLICIES.
        InvalidColorSpaceInput: If any coordinate is NaN or infinite.
    """
    validate_policy(policy)
    check_finite(L, a, b)

    rgb = _oklab_to_linear_srgb(L, a, b)
    in_gamut = is_in_gamut(*rgb)
    if policy == 'clip' or B.all(in_gamut):
        return GamutResult(rgb, in_gamut)

    if policy == 'bisect-chroma':
        mapped = bisect_chroma(L, a, b)
    else:
        mapped = _oklab_to_linear_srgb(*cone_clamp(L, a, b, fast=True, max_chroma=max_chroma))
        mapped = tuple(B.where(in_gamut, orig, m) for orig, m in zip(rgb, mapped))
    return GamutResult(mapped, in_gamut)


def map_oklch_to_gamut(
    L: Array,
    C: Array,
    H: Array,
    policy: GamutPolicy = 'clip',
    max_chroma: Optional[Array] = None,
) -> GamutResult:
    """Same as map_to_gamut() for Oklch input (H in degrees)."""
    return map_to_gamut(*oklch_to_oklab(L, C, H), policy=policy, max_chroma=max_chroma)


# === Max chroma computation ===

def _outside_cone(c: Array, cos_h: Array, sin_h: Array) -> Array:
    """True where chroma c at L=1 gives a negative linear sRGB channel."""
    r, g, b = _oklab_to_linear_srgb(1.0, c * cos_h, c * sin_h)
    return (r < 0) | (g < 0) | (b < 0)


def max_chroma_for_hue(hue: Array, steps: int = CHROMA_SEARCH_STEPS) -> Array:
    """Maximum chroma at L=1 before the ray at this hue leaves the gamut cone.

    Scaling linear sRGB by k scales Oklab by k^(1/3), so the sRGB gamut seen
    from black is a cone: (L, L*a, L*b) has non-negative RGB iff (1, a, b)
    does. At L=1 the upper cube faces admit only white, so the limit is the
    first chroma at which a channel turns negative.

    A coarse scan finds the first crossing (the boundary is not star-shaped
    right at the blue cusp), then bisection refines it.

    For repeated lookups, prefer max_chroma_fast() which uses a precomputed LUT.
    """
    check_finite(hue)
    H_rad = (hue % 360) * (pi / 180)
    cos_h = B.cos(H_rad)
    sin_h = B.sin(H_rad)

    cell = CHROMA_SEARCH_MAX / CHROMA_SCAN_CELLS
    lo = B.zeros_like(H_rad)
    hi = B.full_like(H_rad, CHROMA_SEARCH_MAX)
    found = lo < 0  # all False
    for i in range(1, CHROMA_SCAN_CELLS + 1):
        crossed = _outside_cone(i * cell, cos_h, sin_h) & ~found
        lo = B.where(crossed, (i - 1) * cell, lo)
        hi = B.where(crossed, i * cell, hi)
        found = found | crossed

    for _ in range(steps):
        mid = (lo + hi) / 2
        outside = _outside_cone(mid, cos_h, sin_h)
        lo = B.where(outside, lo, mid)
        hi = B.where(outside, mid, hi)

    return lo


def max_chroma_for_lh(L: Array, H: Array, steps: int = MAX_CHROMA_LH_STEPS) -> Array:
    """Find maximum in-gamut chroma for given L and H via binary search.

    Unlike the cone limit this honours all six cube faces, so it is the true
    boundary of the slice at lightness L.
    """
    check_finite(L, H)
    lo = B.zeros_like(L)
    hi = B.full_like(L, MAX_CHROMA_LH_UPPER)

    for _ in range(steps):
        mid = (lo + hi) / 2
        valid = is_in_gamut(*_oklab_to_linear_srgb(*oklch_to_oklab(L, mid, H)))
        lo = B.where(valid, mid, lo)
        hi = B.where(valid, hi, mid)

    return lo


def cone_boundary(hue: float, lightness: Array) -> Array:
    """Chroma of the cone boundary line at each lightness for one hue."""
    return max_chroma_for_hue(hue) * lightness


# === Precomputed LUT for fast cone clamping ===

_CHROMA_LIMIT_LUT: np.ndarray | None = None


def _build_chroma_limit_lut() -> np.ndarray:
    """Build the per-degree chroma limit table. Called once on first use."""
    hues = np.arange(CHROMA_LUT_STEPS, dtype=np.float64) * (360.0 / CHROMA_LUT_STEPS)
    lut = np.asarray(max_chroma_for_hue(hues), dtype=np.float64)
    logger.debug(
        "Built chroma limit LUT: %d hues, chroma %.4f..%.4f",
        lut.size, lut.min(), lut.max(),
    )
    return lut


def get_chroma_limit_lut() -> np.ndarray:
    """Get or build the chroma limit LUT."""
    global _CHROMA_LIMIT_LUT
    if _CHROMA_LIMIT_LUT is None:
        _CHROMA_LIMIT_LUT = _build_chroma_limit_lut()
    return _CHROMA_LIMIT_LUT


def max_chroma_fast(hue: Array) -> Array:
    """Fast chroma limit lookup via LUT + linear interpolation around the circle.

    Much faster than the search for large arrays, but smooths over the blue
    cusp where the exact limit jumps.
    """
    lut = get_chroma_limit_lut()
    check_finite(hue)

    H_np = B.to_numpy(hue)
    H_idx = (H_np % 360) * (CHROMA_LUT_STEPS / 360.0)

    H_lo = np.floor(H_idx).astype(int) % CHROMA_LUT_STEPS
    H_hi = (H_lo + 1) % CHROMA_LUT_STEPS
    H_frac = H_idx - np.floor(H_idx)

    result = lut[H_lo] * (1 - H_frac) + lut[H_hi] * H_frac
    return B.from_numpy(np.asarray(result, dtype=np.float64), hue)
