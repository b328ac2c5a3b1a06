"""Spectral locus and line of purples in the Oklab (a, b) plane.

Every point is projected onto the L=1 plane by dividing a and b by L, which
is exact since Oklab scales with the cube root of intensity. The closed
outline looks a bit like a ghost.
"""

import math
from typing import Iterable, Iterator, NamedTuple, Optional, Sequence

import numpy as np

from okgamut.defaults import PURPLE_EXPONENT, PURPLE_SEGMENTS
from .cie1931 import CIE_1931_2DEG, SpectralSample
from .errors import NonMonotonicHueError
from .oklab import check_finite, xyz_to_oklab


class LocusPoint(NamedTuple):
    """A point of the outline in the L=1 plane."""
    a: float
    b: float
    wavelength: Optional[float] = None  # None on the line of purples


def _columns(table: Sequence[SpectralSample]) -> tuple[np.ndarray, ...]:
    if len(table) < 2:
        raise ValueError(f"Spectral table needs at least 2 samples, got {len(table)}")
    data = np.asarray(table, dtype=np.float64)
    return data[:, 0], data[:, 1], data[:, 2], data[:, 3]


def _unit_lightness_ab(X, Y, Z) -> tuple[np.ndarray, np.ndarray]:
    """(a, b) coordinates in Oklab of XYZ scaled to L=1."""
    L, a, b = xyz_to_oklab(X, Y, Z)
    return a / L, b / L


def spectral_locus_in_oklab(
    table: Sequence[SpectralSample] = CIE_1931_2DEG,
) -> Iterator[LocusPoint]:
    """Yield one LocusPoint per spectral sample, in table order."""
    _, X, Y, Z = _columns(table)
    a, b = _unit_lightness_ab(X, Y, Z)
    for sample, a_i, b_i in zip(table, a, b):
        yield LocusPoint(float(a_i), float(b_i), sample.wavelength)


def line_of_purples(
    segments: int = PURPLE_SEGMENTS,
    table: Sequence[SpectralSample] = CIE_1931_2DEG,
    exponent: float = PURPLE_EXPONENT,
) -> Iterator[LocusPoint]:
    """Yield the non-spectral closing edge, from the red end to the violet end.

    Points are mixed linearly in XYZ at ratios (i + 1) / (segments + 1),
    endpoints excluded. The line is straight in XYZ but not in Oklab.
    https://en.wikipedia.org/wiki/Line_of_purples

    Args:
        segments: Number of interior points
        table: Spectral samples ordered by wavelength
        exponent: Ratios are raised to this power; 3 roughly compensates the
                  cube root in the Oklab transform and spaces points more evenly
    """
    if segments < 0:
        raise ValueError(f"segments must be >= 0, got {segments}")
    check_finite(exponent)
    if segments == 0:
        return

    _, X, Y, Z = _columns(table)
    ratio = ((np.arange(segments) + 1) / (segments + 1)) ** exponent

    def mix(channel):
        # Ratio 0 is 100% the red end, 1 is 100% the violet end
        return (1 - ratio) * channel[-1] + ratio * channel[0]

    a, b = _unit_lightness_ab(mix(X), mix(Y), mix(Z))
    for a_i, b_i in zip(a, b):
        yield LocusPoint(float(a_i), float(b_i))


def ghost_outline(
    segments: int = PURPLE_SEGMENTS,
    table: Sequence[SpectralSample] = CIE_1931_2DEG,
    exponent: float = PURPLE_EXPONENT,
) -> list[LocusPoint]:
    """Spectral locus followed by the line of purples (closing edge implicit)."""
    return [
        *spectral_locus_in_oklab(table),
        *line_of_purples(segments, table, exponent),
    ]


def hue_degrees(a: float, b: float) -> float:
    """Hue angle atan2(b, a) in degrees, normalized to [0, 360)."""
    hue = math.degrees(math.atan2(b, a)) % 360.0
    # Tiny negative angles round up to exactly 360
    return 0.0 if hue >= 360.0 else hue


def assert_clockwise(points: Iterable[Sequence[float]]) -> None:
    """Check that hue strictly decreases from each point to the next.

    The outline is only a simple closed curve if it winds clockwise. A
    violation means bad source data or a sign/axis error in the transforms.

    Points are (a, b) pairs; a ``wavelength`` attribute, if present, is
    reported in the error.

    TODO: Allow exactly one wrap from ~0 to ~360 degrees. Until then a
    complete outline fails at its wrap point.

    Raises:
        NonMonotonicHueError: At the first point whose hue is not below the
            previous point's hue.
    """
    previous = None
    previous_hue = None
    for index, point in enumerate(points):
        a, b = point[0], point[1]
        check_finite(a, b)
        hue = hue_degrees(a, b)
        if previous is not None and not hue < previous_hue:
            raise NonMonotonicHueError(
                point, previous, index, hue, previous_hue,
                wavelength=getattr(point, 'wavelength', None),
            )
        previous, previous_hue = point, hue


# === CIE xy chromaticity ===

def xy_chromaticity(X: float, Y: float, Z: float) -> tuple[float, float]:
    """Convert XYZ to xyY, discarding Y."""
    total = X + Y + Z
    return X / total, Y / total


def horseshoe_xy(table: Sequence[SpectralSample] = CIE_1931_2DEG) -> Iterator[tuple[float, float]]:
    """Yield the spectral locus in the CIE xy chromaticity diagram."""
    for sample in table:
        yield xy_chromaticity(sample.X, sample.Y, sample.Z)
