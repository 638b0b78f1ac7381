"""Éclairement lunaire via Swiss Ephemeris.

Backend Moshier (`FLG_MOSEPH`): aucune donnée d'éphéméride à installer, précision largement
suffisante pour nommer une phase et dater un quartier à l'heure près.
"""

import math
from datetime import UTC, datetime

import swisseph as swe

from astrocusp.domain.lunar import Illumination


def julian_day_ut(instant: datetime) -> float:
    """Jour julien UT d'un instant (naïf = UTC)."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    t = instant.astimezone(UTC)
    hour = t.hour + t.minute / 60.0 + (t.second + t.microsecond / 1e6) / 3600.0
    return swe.julday(t.year, t.month, t.day, hour, swe.GREG_CAL)


class SwissEphemerisMoon:
    """Fournisseur `MoonIllumination` fondé sur l'élongation Soleil-Lune."""

    def __init__(self, flags: int = swe.FLG_MOSEPH):
        self.flags = flags

    def elongation(self, instant: datetime) -> float:
        """Élongation écliptique Lune - Soleil en degrés, dans [0, 360)."""
        jd = julian_day_ut(instant)
        sun, _ = swe.calc_ut(jd, swe.SUN, self.flags)
        moon, _ = swe.calc_ut(jd, swe.MOON, self.flags)
        return (moon[0] - sun[0]) % 360.0

    def illumination(self, instant: datetime) -> Illumination:
        elongation = self.elongation(instant)
        phase = elongation / 360.0
        fraction = (1 - math.cos(math.radians(elongation))) / 2
        return Illumination(fraction=fraction, phase=phase % 1.0)
