"""Central place for okgamut default settings."""

# Display encoding
DISPLAY_GAMMA: float = 2.2  # Pure power curve, not the piecewise sRGB EOTF

# Gamut mapping
BISECT_ITERATIONS: int = 10  # Fixed budget, not a tolerance loop
CONE_CLAMP_RTOL: float = 1e-12  # Chroma this close to the cone limit is left alone

# Chroma limit search (cone at L=1)
CHROMA_SEARCH_MAX: float = 1.0  # Blue peaks just below 0.7
CHROMA_SCAN_CELLS: int = 256  # Coarse scan so the first crossing is found
CHROMA_SEARCH_STEPS: int = 40  # Bisection steps inside the crossing cell
CHROMA_LUT_STEPS: int = 360  # One entry per degree of hue

# Exact in-cube chroma at a given lightness
MAX_CHROMA_LH_UPPER: float = 0.5  # Always out of gamut
MAX_CHROMA_LH_STEPS: int = 16

# Spectral locus
PURPLE_SEGMENTS: int = 100
PURPLE_EXPONENT: float = 1.0  # 3.0 roughly compensates the cube root

# Hue slice
DEFAULT_SLICE_SIZE: tuple[int, int] = (500, 500)
DEFAULT_SLICE_HUE: float = 0.0
DEFAULT_MAX_CHROMA: float = 0.4

# Lightness sweep
DEFAULT_SWEEP_WIDTH: int = 512
DEFAULT_SWEEP_CHROMA: float = 0.15
DEFAULT_SWEEP_HUE: float = 0.0
