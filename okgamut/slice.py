"""Pixel-grid evaluation of the gamut demos.

Produces the arrays the demo pages draw, without drawing anything:

- render_hue_slice(): a constant-hue slice, lightness 1 -> 0 top to bottom
  and chroma 0 -> max_chroma left to right, gamut-mapped per policy.
- lightness_sweep(): L from 0 to 1 at fixed chroma and hue, with the
  perceived lightness of each color after gamut mapping.

Example:
    from okgamut.slice import SliceParams, render_hue_slice

    result = render_hue_slice(SliceParams(hue=30, policy='bisect-chroma'))
    image = result.rgb8  # (height, width, 3) uint8
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from math import cos, pi, sin
from typing import Literal, NamedTuple

import numpy as np

from okgamut.defaults import (
    DEFAULT_MAX_CHROMA,
    DEFAULT_SLICE_HUE,
    DEFAULT_SLICE_SIZE,
    DEFAULT_SWEEP_CHROMA,
    DEFAULT_SWEEP_HUE,
    DEFAULT_SWEEP_WIDTH,
)
from okgamut.colorspace import (
    GamutPolicy,
    linear_srgb_to_oklab,
    linear_to_gamma_srgb,
    linear_to_srgb,
    map_to_gamut,
    max_chroma_for_hue,
    oklch_to_oklab,
    to_8bit,
)
from okgamut.colorspace.gamut import validate_policy
from okgamut.colorspace.oklab import check_finite

logger = logging.getLogger(__name__)

Transfer = Literal['gamma', 'srgb']

_ENCODERS = {
    'gamma': linear_to_gamma_srgb,
    'srgb': linear_to_srgb,
}


def _encoder(transfer: str):
    try:
        return _ENCODERS[transfer]
    except KeyError:
        raise ValueError(f"Unknown transfer: {transfer!r}") from None


@dataclass
class SliceParams:
    """Inputs of the hue slice page."""
    hue: float = DEFAULT_SLICE_HUE
    policy: GamutPolicy = 'clip'
    width: int = DEFAULT_SLICE_SIZE[0]
    height: int = DEFAULT_SLICE_SIZE[1]
    max_chroma: float = DEFAULT_MAX_CHROMA
    highlight: bool = False  # Invert colors that were out of gamut
    transfer: Transfer = 'gamma'

    def validate(self) -> None:
        """Raise before any pixel is evaluated if the parameters are unusable."""
        validate_policy(self.policy)
        check_finite(self.hue, self.max_chroma)
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Slice must be at least 2x2, got {self.width}x{self.height}")
        if self.max_chroma <= 0:
            raise ValueError(f"max_chroma must be positive, got {self.max_chroma}")
        _encoder(self.transfer)


class HueSlice(NamedTuple):
    rgb8: np.ndarray  # (height, width, 3) uint8
    in_gamut: np.ndarray  # (height, width) bool, before mapping
    boundary: np.ndarray  # (height,) column of the cone boundary per row


class LightnessSweep(NamedTuple):
    srgb: np.ndarray  # (width, 3) encoded, clamped to [0, 1]
    in_gamut: np.ndarray  # (width,) bool, before mapping
    lightness: np.ndarray  # (width,) Oklab L after mapping and clamping


def render_hue_slice(params: SliceParams) -> HueSlice:
    """Evaluate a constant-hue slice of Oklch.

    Works in Oklab by scaling towards the a and b of max_chroma at the hue.
    """
    params.validate()
    start = time.perf_counter()
    width, height = params.width, params.height

    hue_rad = params.hue * pi / 180
    max_a = params.max_chroma * cos(hue_rad)
    max_b = params.max_chroma * sin(hue_rad)

    lightness = 1 - np.arange(height, dtype=np.float64) / (height - 1)
    progress = np.arange(width, dtype=np.float64) / (width - 1)
    L, a, b = np.broadcast_arrays(
        lightness[:, None], (max_a * progress)[None, :], (max_b * progress)[None, :],
    )

    # One hue per slice, so the cone limit is searched once
    cone_limit = float(max_chroma_for_hue(params.hue))
    rgb, in_gamut = map_to_gamut(L, a, b, policy=params.policy, max_chroma=cone_limit)
    if params.highlight:
        rgb = tuple(np.where(in_gamut, c, 1 - c) for c in rgb)

    encode = _encoder(params.transfer)
    rgb8 = to_8bit(np.stack([encode(c) for c in rgb], axis=-1))

    boundary = cone_limit * lightness / params.max_chroma * (width - 1)

    logger.debug(
        "Rendered %dx%d slice at hue %.1f (%s) in %.1f ms",
        width, height, params.hue, params.policy,
        (time.perf_counter() - start) * 1000,
    )
    return HueSlice(rgb8, np.asarray(in_gamut), np.asarray(boundary))


def lightness_sweep(
    chroma: float = DEFAULT_SWEEP_CHROMA,
    hue: float = DEFAULT_SWEEP_HUE,
    width: int = DEFAULT_SWEEP_WIDTH,
    policy: GamutPolicy = 'clip',
    transfer: Transfer = 'gamma',
) -> LightnessSweep:
    """Sweep Oklch lightness from 0 to 1 at constant chroma and hue.

    Returns:
        LightnessSweep with the displayed colors, the in-gamut flags of the
        requested colors, and the Oklab lightness actually displayed. With a
        perfect gamut mapping the lightness would be a straight line.
    """
    validate_policy(policy)
    check_finite(chroma, hue)
    if width < 2:
        raise ValueError(f"Sweep needs at least 2 samples, got {width}")
    encode = _encoder(transfer)

    L = np.linspace(0.0, 1.0, width)
    L, a, b = oklch_to_oklab(L, np.full_like(L, chroma), np.full_like(L, hue))
    rgb, in_gamut = map_to_gamut(
        L, a, b, policy=policy, max_chroma=float(max_chroma_for_hue(hue)),
    )

    # What the display will show
    rgb = tuple(np.clip(c, 0.0, 1.0) for c in rgb)
    displayed_L = linear_srgb_to_oklab(*rgb)[0]

    srgb = np.stack([encode(c) for c in rgb], axis=-1)
    return LightnessSweep(srgb, np.asarray(in_gamut), displayed_L)


def in_gamut_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    """Find stretches of True in a 1D mask.

    Returns:
        List of (start, length) tuples in increasing order of start.
    """
    mask = np.asarray(mask, dtype=bool).ravel()
    edges = np.diff(np.concatenate(([0], mask.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)
    return [(int(s), int(e - s)) for s, e in zip(starts, ends)]
