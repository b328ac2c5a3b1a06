"""Oklab color space conversions, sRGB gamut mapping, and the spectral locus.

This module provides:
- XYZ <-> Oklab <-> linear sRGB conversions and a simple 1/2.2 gamma encoding
- Gamut testing and three out-of-gamut policies (clip, bisect-chroma, cone-clamp)
- Per-hue chroma limits (exact search and a precomputed LUT)
- The spectral locus and line of purples in the Oklab (a, b) plane
- Backend-agnostic: works with floats, numpy arrays or torch tensors

Example:
    from okgamut.colorspace import map_to_gamut, linear_to_gamma_srgb

    rgb, in_gamut = map_to_gamut(0.7, 0.3, 0.1, policy='bisect-chroma')
    srgb = [linear_to_gamma_srgb(c) for c in rgb]
"""

from .oklab import (
    xyz_to_oklab,
    oklab_to_xyz,
    oklab_to_linear_srgb,
    linear_srgb_to_oklab,
    oklch_to_oklab,
    oklab_to_oklch,
    oklch_to_linear_srgb,
    oklab_to_gamma_srgb,
    linear_to_gamma_srgb,
    linear_to_srgb,
    to_8bit,
    LINEAR_SRGB_TO_XYZ,
    XYZ_TO_LINEAR_SRGB,
)

from .gamut import (
    GamutPolicy,
    GAMUT_POLICIES,
    GamutResult,
    BisectionStep,
    is_in_gamut,
    clip_linear_srgb,
    bisect_chroma,
    iter_bisect_chroma,
    cone_clamp,
    map_to_gamut,
    map_oklch_to_gamut,
    max_chroma_for_hue,
    max_chroma_for_lh,
    max_chroma_fast,
    get_chroma_limit_lut,
    cone_boundary,
)

from .spectral import (
    LocusPoint,
    spectral_locus_in_oklab,
    line_of_purples,
    ghost_outline,
    assert_clockwise,
    hue_degrees,
    xy_chromaticity,
    horseshoe_xy,
)

from .cie1931 import CIE_1931_2DEG, SpectralSample

from .errors import (
    ColorspaceError,
    InvalidColorSpaceInput,
    NonMonotonicHueError,
    UnsupportedGamutPolicy,
)

__all__ = [
    # Conversions
    'xyz_to_oklab',
    'oklab_to_xyz',
    'oklab_to_linear_srgb',
    'linear_srgb_to_oklab',
    'oklch_to_oklab',
    'oklab_to_oklch',
    'oklch_to_linear_srgb',
    'oklab_to_gamma_srgb',
    'linear_to_gamma_srgb',
    'linear_to_srgb',
    'to_8bit',
    'LINEAR_SRGB_TO_XYZ',
    'XYZ_TO_LINEAR_SRGB',
    # Gamut mapping
    'GamutPolicy',
    'GAMUT_POLICIES',
    'GamutResult',
    'BisectionStep',
    'is_in_gamut',
    'clip_linear_srgb',
    'bisect_chroma',
    'iter_bisect_chroma',
    'cone_clamp',
    'map_to_gamut',
    'map_oklch_to_gamut',
    # Chroma limits
    'max_chroma_for_hue',
    'max_chroma_for_lh',
    'max_chroma_fast',
    'get_chroma_limit_lut',
    'cone_boundary',
    # Spectral locus
    'LocusPoint',
    'spectral_locus_in_oklab',
    'line_of_purples',
    'ghost_outline',
    'assert_clockwise',
    'hue_degrees',
    'xy_chromaticity',
    'horseshoe_xy',
    'CIE_1931_2DEG',
    'SpectralSample',
    # Errors
    'ColorspaceError',
    'InvalidColorSpaceInput',
    'NonMonotonicHueError',
    'UnsupportedGamutPolicy',
]
