"""Colorspace conversion and gamut mapping errors."""


class ColorspaceError(Exception):
    """Base class for colorspace errors."""
    pass


class InvalidColorSpaceInput(ColorspaceError, ValueError):
    """Input coordinates contain NaN or infinity."""
    pass


class UnsupportedGamutPolicy(ColorspaceError, ValueError):
    """Unknown gamut mapping policy."""

    def __init__(self, policy, choices=()):
        self.policy = policy
        self.choices = tuple(choices)
        message = f"Unknown gamut policy: {policy!r}"
        if self.choices:
            message += f" (expected one of {', '.join(self.choices)})"
        super().__init__(message)


class NonMonotonicHueError(ColorspaceError):
    """Hue did not strictly decrease between two consecutive curve points.

    Attributes:
        point: The offending (a, b) point
        previous: The point before it
        index: Position of ``point`` in the checked sequence
        hue: Hue angle of ``point`` in degrees [0, 360)
        previous_hue: Hue angle of ``previous``
        wavelength: Wavelength of ``point`` in nm, or None for non-spectral points
    """

    def __init__(self, point, previous, index, hue, previous_hue, wavelength=None):
        self.point = point
        self.previous = previous
        self.index = index
        self.hue = hue
        self.previous_hue = previous_hue
        self.wavelength = wavelength

        where = f"{wavelength} nm" if wavelength is not None else "line of purples"
        super().__init__(
            f"Hue not clockwise at index {index} ({where}): "
            f"(a, b) = ({point[0]:.6f}, {point[1]:.6f}) has hue {hue:.4f}, "
            f"previous (a, b) = ({previous[0]:.6f}, {previous[1]:.6f}) "
            f"has hue {previous_hue:.4f}"
        )
