"""Oklab color space conversions.

Reference: https://bottosson.github.io/posts/oklab/

All functions accept Python floats, numpy arrays or torch tensors and
return a value of the same kind. Triples are passed as three separate
channel arguments and returned as 3-tuples.
"""

from math import pi

import numpy as np

from okgamut.defaults import DISPLAY_GAMMA
from . import _backend as B
from ._backend import Array
from .errors import InvalidColorSpaceInput

# === Oklab matrices ===
# From Björn Ottosson's reference implementation

# XYZ (D65) -> LMS
_XYZ_TO_LMS = (
    (0.8189330101, 0.3618667424, -0.1288597137),
    (0.0329845436, 0.9293118715, 0.0361456387),
    (0.0482003018, 0.2643662691, 0.6338517070),
)

# Linear RGB -> LMS
_RGB_TO_LMS = (
    (0.4122214708, 0.5363325363, 0.0514459929),
    (0.2119034982, 0.6806995451, 0.1073969566),
    (0.0883024619, 0.2817188376, 0.6299787005),
)

# LMS cube root -> Oklab
_LMS_TO_OKLAB = (
    (0.2104542553, 0.7936177850, -0.0040720468),
    (1.9779984951, -2.4285922050, 0.4505937099),
    (0.0259040371, 0.7827717662, -0.8086757660),
)

# Oklab -> LMS cube root (published, accurate to ~1e-8)
_OKLAB_TO_LMS = (
    (1.0, 0.3963377774, 0.2158037573),
    (1.0, -0.1055613458, -0.0638541728),
    (1.0, -0.0894841775, -1.2914855480),
)

# LMS -> Linear RGB
_LMS_TO_RGB = (
    (+4.0767416621, -3.3077115913, +0.2309699292),
    (-1.2684380046, +2.6097574011, -0.3413193965),
    (-0.0041960863, -0.7034186147, +1.7076147010),
)

# Exact inverses of the XYZ-side matrices, for round-tripping XYZ
_LMS_TO_XYZ = tuple(map(tuple, np.linalg.inv(np.array(_XYZ_TO_LMS))))
_OKLAB_TO_LMS_EXACT = tuple(map(tuple, np.linalg.inv(np.array(_LMS_TO_OKLAB))))

# Linear sRGB <-> XYZ implied by the two LMS matrices above
LINEAR_SRGB_TO_XYZ: np.ndarray = np.array(_LMS_TO_XYZ) @ np.linalg.inv(np.array(_LMS_TO_RGB))
XYZ_TO_LINEAR_SRGB: np.ndarray = np.linalg.inv(LINEAR_SRGB_TO_XYZ)


def _mat3(m, x: Array, y: Array, z: Array) -> tuple[Array, Array, Array]:
    """Apply a 3x3 matrix to three channel arrays."""
    return (
        m[0][0]*x + m[0][1]*y + m[0][2]*z,
        m[1][0]*x + m[1][1]*y + m[1][2]*z,
        m[2][0]*x + m[2][1]*y + m[2][2]*z,
    )


def check_finite(*values: Array) -> None:
    """Raise InvalidColorSpaceInput if any value contains NaN or infinity."""
    if not B.all_finite(*values):
        raise InvalidColorSpaceInput(
            f"Non-finite color coordinates: {', '.join(repr(v) for v in values)}"
        )


# === Unchecked kernels (used in inner loops) ===

def _xyz_to_oklab(X: Array, Y: Array, Z: Array) -> tuple[Array, Array, Array]:
    l, m, s = _mat3(_XYZ_TO_LMS, X, Y, Z)
    # Real cube root: off-locus XYZ can produce negative LMS
    return _mat3(_LMS_TO_OKLAB, B.cbrt(l), B.cbrt(m), B.cbrt(s))


def _oklab_to_linear_srgb(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    l_, m_, s_ = _mat3(_OKLAB_TO_LMS, L, a, b)
    return _mat3(_LMS_TO_RGB, l_**3, m_**3, s_**3)


# === Core Conversions ===

def xyz_to_oklab(X: Array, Y: Array, Z: Array) -> tuple[Array, Array, Array]:
    """CIE XYZ -> Oklab.

    Defined for all real input, including negative or >1 values that arise
    off the physical locus.
    """
    check_finite(X, Y, Z)
    return _xyz_to_oklab(X, Y, Z)


def oklab_to_xyz(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """Oklab -> CIE XYZ, the exact algebraic inverse of xyz_to_oklab()."""
    check_finite(L, a, b)
    l_, m_, s_ = _mat3(_OKLAB_TO_LMS_EXACT, L, a, b)
    return _mat3(_LMS_TO_XYZ, l_**3, m_**3, s_**3)


def oklab_to_linear_srgb(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """Oklab -> linear sRGB. Output may be negative or above 1."""
    check_finite(L, a, b)
    return _oklab_to_linear_srgb(L, a, b)


def linear_srgb_to_oklab(r: Array, g: Array, b: Array) -> tuple[Array, Array, Array]:
    """Linear sRGB -> Oklab via LMS intermediate."""
    check_finite(r, g, b)
    l, m, s = _mat3(_RGB_TO_LMS, r, g, b)
    return _mat3(_LMS_TO_OKLAB, B.cbrt(l), B.cbrt(m), B.cbrt(s))


def oklch_to_oklab(L: Array, C: Array, H: Array) -> tuple[Array, Array, Array]:
    """Oklch -> Oklab. H in degrees."""
    check_finite(L, C, H)
    H_rad = H * (pi / 180)
    a = C * B.cos(H_rad)
    b = C * B.sin(H_rad)
    return L, a, b


def oklab_to_oklch(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """Oklab -> Oklch. Returns H in degrees [0, 360)."""
    check_finite(L, a, b)
    C = B.sqrt(a**2 + b**2)
    H_rad = B.atan2(b, a)
    H = H_rad * (180 / pi)
    # Wrap to [0, 360)
    H = H % 360
    return L, C, H


# === Transfer functions ===

def linear_to_gamma_srgb(x: Array) -> Array:
    """Linear sRGB -> "simple sRGB", a pure 1/2.2 power curve.

    Negative values are mirrored: sign(x) * |x| ** (1/2.2). This is not the
    two-segment sRGB curve; see linear_to_srgb() for that.
    https://en.wikipedia.org/wiki/SRGB#Transfer_function_(%22gamma%22)
    """
    check_finite(x)
    return B.sign(x) * B.pow(B.abs(x), 1 / DISPLAY_GAMMA)


def linear_to_srgb(x: Array) -> Array:
    """Linear RGB -> sRGB gamma encoding (per channel, IEC 61966-2-1)."""
    check_finite(x)
    threshold = 0.0031308
    low = x * 12.92
    high = 1.055 * B.pow(B.maximum(x, B.full_like(x, 1e-10)), 1/2.4) - 0.055
    return B.where(x <= threshold, low, high)


def to_8bit(x: Array) -> np.ndarray:
    """Scale [0, 1] values to uint8 with round-half-to-even and clamping.

    Matches what a canvas Uint8ClampedArray does on assignment, so callers
    don't have to clip out-of-gamut values first.
    """
    x = B.to_numpy(x)
    check_finite(x)
    return np.clip(np.rint(x * 255.0), 0, 255).astype(np.uint8)


# === Convenience Composites ===

def oklch_to_linear_srgb(L: Array, C: Array, H: Array) -> tuple[Array, Array, Array]:
    """Oklch -> linear sRGB (no gamma encoding)."""
    L_ok, a, b = oklch_to_oklab(L, C, H)
    return oklab_to_linear_srgb(L_ok, a, b)


def oklab_to_gamma_srgb(L: Array, a: Array, b: Array) -> Array:
    """Oklab -> simple-gamma sRGB in one call.

    Returns:
        RGB array with shape (..., 3), values may be outside [0,1] if out of gamut
    """
    r, g, b = oklab_to_linear_srgb(L, a, b)
    return B.stack([linear_to_gamma_srgb(r), linear_to_gamma_srgb(g), linear_to_gamma_srgb(b)], axis=-1)
