"""Lune « moyenne » déterministe (dev/tests).

Phase linéaire sur le mois synodique moyen à partir d'une nouvelle lune de référence; aucune
dépendance externe et des quartiers exactement espacés d'un quart de cycle.
"""

import math
from datetime import UTC, datetime

from astrocusp.domain.lunar import Illumination

REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=UTC)
SYNODIC_MONTH_DAYS = 29.530588853


class MeanSynodicMoon:
    """Fournisseur `MoonIllumination` sur le cycle synodique moyen."""

    def __init__(self, reference: datetime = REFERENCE_NEW_MOON):
        self.reference = reference

    def illumination(self, instant: datetime) -> Illumination:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        days = (instant - self.reference).total_seconds() / 86400.0
        phase = (days / SYNODIC_MONTH_DAYS) % 1.0
        fraction = (1 - math.cos(2 * math.pi * phase)) / 2
        return Illumination(fraction=fraction, phase=phase)
