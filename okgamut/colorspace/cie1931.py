"""CIE 1931 2° standard observer color matching functions.

Values at 5nm intervals from 380-780nm, as tabulated in CIE 15:2004 Table T.2.
Each row is the XYZ tristimulus value of a unit-power monochromatic stimulus,
so the table traces the spectral locus in order of increasing wavelength.
"""

from typing import NamedTuple


class SpectralSample(NamedTuple):
    wavelength: int  # nm
    X: float
    Y: float
    Z: float


CIE_1931_2DEG: tuple[SpectralSample, ...] = (
    SpectralSample(380, 0.001368, 0.000039, 0.006450),
    SpectralSample(385, 0.002236, 0.000064, 0.010550),
    SpectralSample(390, 0.004243, 0.000120, 0.020050),
    SpectralSample(395, 0.007650, 0.000217, 0.036210),
    SpectralSample(400, 0.014310, 0.000396, 0.067850),
    SpectralSample(405, 0.023190, 0.000640, 0.110200),
    SpectralSample(410, 0.043510, 0.001210, 0.207400),
    SpectralSample(415, 0.077630, 0.002180, 0.371300),
    SpectralSample(420, 0.134380, 0.004000, 0.645600),
    SpectralSample(425, 0.214770, 0.007300, 1.039050),
    SpectralSample(430, 0.283900, 0.011600, 1.385600),
    SpectralSample(435, 0.328500, 0.016840, 1.622960),
    SpectralSample(440, 0.348280, 0.023000, 1.747060),
    SpectralSample(445, 0.348060, 0.029800, 1.782600),
    SpectralSample(450, 0.336200, 0.038000, 1.772110),
    SpectralSample(455, 0.318700, 0.048000, 1.744100),
    SpectralSample(460, 0.290800, 0.060000, 1.669200),
    SpectralSample(465, 0.251100, 0.073900, 1.528100),
    SpectralSample(470, 0.195360, 0.090980, 1.287640),
    SpectralSample(475, 0.142100, 0.112600, 1.041900),
    SpectralSample(480, 0.095640, 0.139020, 0.812950),
    SpectralSample(485, 0.058010, 0.169300, 0.616200),
    SpectralSample(490, 0.032010, 0.208020, 0.465180),
    SpectralSample(495, 0.014700, 0.258600, 0.353300),
    SpectralSample(500, 0.004900, 0.323000, 0.272000),
    SpectralSample(505, 0.002400, 0.407300, 0.212300),
    SpectralSample(510, 0.009300, 0.503000, 0.158200),
    SpectralSample(515, 0.029100, 0.608200, 0.111700),
    SpectralSample(520, 0.063270, 0.710000, 0.078250),
    SpectralSample(525, 0.109600, 0.793200, 0.057250),
    SpectralSample(530, 0.165500, 0.862000, 0.042160),
    SpectralSample(535, 0.225750, 0.914850, 0.029840),
    SpectralSample(540, 0.290400, 0.954000, 0.020300),
    SpectralSample(545, 0.359700, 0.980300, 0.013400),
    SpectralSample(550, 0.433450, 0.994950, 0.008750),
    SpectralSample(555, 0.512050, 1.000000, 0.005750),
    SpectralSample(560, 0.594500, 0.995000, 0.003900),
    SpectralSample(565, 0.678400, 0.978600, 0.002750),
    SpectralSample(570, 0.762100, 0.952000, 0.002100),
    SpectralSample(575, 0.842500, 0.915400, 0.001800),
    SpectralSample(580, 0.916300, 0.870000, 0.001650),
    SpectralSample(585, 0.978600, 0.816300, 0.001400),
    SpectralSample(590, 1.026300, 0.757000, 0.001100),
    SpectralSample(595, 1.056700, 0.694900, 0.001000),
    SpectralSample(600, 1.062200, 0.631000, 0.000800),
    SpectralSample(605, 1.045600, 0.566800, 0.000600),
    SpectralSample(610, 1.002600, 0.503000, 0.000340),
    SpectralSample(615, 0.938400, 0.441200, 0.000240),
    SpectralSample(620, 0.854450, 0.381000, 0.000190),
    SpectralSample(625, 0.751400, 0.321000, 0.000100),
    SpectralSample(630, 0.642400, 0.265000, 0.000050),
    SpectralSample(635, 0.541900, 0.217000, 0.000030),
    SpectralSample(640, 0.447900, 0.175000, 0.000020),
    SpectralSample(645, 0.360800, 0.138200, 0.000010),
    SpectralSample(650, 0.283500, 0.107000, 0.000000),
    SpectralSample(655, 0.218700, 0.081600, 0.000000),
    SpectralSample(660, 0.164900, 0.061000, 0.000000),
    SpectralSample(665, 0.121200, 0.044580, 0.000000),
    SpectralSample(670, 0.087400, 0.032000, 0.000000),
    SpectralSample(675, 0.063600, 0.023200, 0.000000),
    SpectralSample(680, 0.046770, 0.017000, 0.000000),
    SpectralSample(685, 0.032900, 0.011920, 0.000000),
    SpectralSample(690, 0.022700, 0.008210, 0.000000),
    SpectralSample(695, 0.015840, 0.005723, 0.000000),
    SpectralSample(700, 0.011359, 0.004102, 0.000000),
    SpectralSample(705, 0.008111, 0.002929, 0.000000),
    SpectralSample(710, 0.005790, 0.002091, 0.000000),
    SpectralSample(715, 0.004109, 0.001484, 0.000000),
    SpectralSample(720, 0.002899, 0.001047, 0.000000),
    SpectralSample(725, 0.002049, 0.000740, 0.000000),
    SpectralSample(730, 0.001440, 0.000520, 0.000000),
    SpectralSample(735, 0.001000, 0.000361, 0.000000),
    SpectralSample(740, 0.000690, 0.000249, 0.000000),
    SpectralSample(745, 0.000476, 0.000172, 0.000000),
    SpectralSample(750, 0.000332, 0.000120, 0.000000),
    SpectralSample(755, 0.000235, 0.000085, 0.000000),
    SpectralSample(760, 0.000166, 0.000060, 0.000000),
    SpectralSample(765, 0.000117, 0.000042, 0.000000),
    SpectralSample(770, 0.000083, 0.000030, 0.000000),
    SpectralSample(775, 0.000059, 0.000021, 0.000000),
    SpectralSample(780, 0.000042, 0.000015, 0.000000),
)
