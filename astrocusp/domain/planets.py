"""
Positions planétaires approchées (modèle linéaire ancré sur une époque).

Chaque planète a une longitude écliptique de base à l'époque et une dérive quotidienne
constante: longitude(t) = wrap360(base + dérive × jours depuis l'époque). Le drapeau rétrograde
est une recherche indépendante dans des fenêtres datées saisies à la main (fin 2025); il n'est pas
dérivé du sens de la dérive.

Les tables ne valent que pour une période bornée: au-delà de la tolérance configurée, chaque
requête émet un `StaleModelWarning` et un log `stale_planet_model`.
"""

import math
import warnings
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

import structlog

from astrocusp.domain.entities import PlanetaryPosition
from astrocusp.domain.errors import StaleModelWarning
from astrocusp.domain.zodiac import Sign

log = structlog.get_logger(__name__)

EPOCH = datetime(2025, 10, 21, tzinfo=UTC)
DEFAULT_TOLERANCE_DAYS = 90


@dataclass(frozen=True)
class LinearOrbit:
    base_longitude: float  # degrés écliptiques à l'époque
    daily_drift: float  # degrés par jour


ORBITS: dict[str, LinearOrbit] = {
    "Mercury": LinearOrbit(225.0, 1.2),
    "Venus": LinearOrbit(195.0, 0.8),
    "Mars": LinearOrbit(235.0, 0.3),
    "Jupiter": LinearOrbit(100.0, 0.05),
    "Saturn": LinearOrbit(345.0, -0.02),
    "Uranus": LinearOrbit(75.0, -0.005),
    "Neptune": LinearOrbit(10.0, -0.003),
    "Pluto": LinearOrbit(305.0, 0.0015),
    "Chiron": LinearOrbit(18.0, -0.01),
}
PLANETS: tuple[str, ...] = tuple(ORBITS)

# Fenêtres rétrogrades inclusives (jours UTC entiers). Mercure, Vénus, Mars et Pluton n'en ont pas.
RETROGRADE_WINDOWS: dict[str, list[tuple[date, date]]] = {
    "Saturn": [(date(2025, 6, 30), date(2025, 11, 28))],
    "Jupiter": [(date(2025, 11, 12), date(2026, 2, 15))],
    "Uranus": [(date(2025, 9, 1), date(2026, 1, 20))],
    "Neptune": [(date(2025, 7, 2), date(2025, 12, 8))],
    "Chiron": [(date(2025, 7, 27), date(2026, 1, 3))],
}

COVERED_FROM = min(start for spans in RETROGRADE_WINDOWS.values() for start, _ in spans)
COVERED_UNTIL = max(end for spans in RETROGRADE_WINDOWS.values() for _, end in spans)


def wrap360(x: float) -> float:
    """Ramène une longitude dans [0, 360)."""
    y = math.fmod(x, 360.0)
    if y < 0:
        y += 360.0
    # fmod(-1e-15) + 360 peut arrondir à 360.0
    return 0.0 if y >= 360.0 else y


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def longitude_at(planet: str, instant: datetime) -> float:
    orbit = ORBITS[planet]
    days = (_as_utc(instant) - EPOCH).total_seconds() / 86400.0
    return wrap360(orbit.base_longitude + orbit.daily_drift * days)


def sign_and_degree(longitude: float) -> tuple[Sign, float]:
    """Signe et degré dans le signe (tronqué au centième, toujours < 30)."""
    lon = wrap360(longitude)
    index = int(lon // 30)
    degree = math.floor((lon - index * 30) * 100) / 100
    return Sign.from_index(index), degree


def is_retrograde(planet: str, instant: datetime) -> bool:
    day = _as_utc(instant).date()
    return any(start <= day <= end for start, end in RETROGRADE_WINDOWS.get(planet, []))


def model_is_current(instant: datetime, tolerance_days: int = DEFAULT_TOLERANCE_DAYS) -> bool:
    """True si l'instant reste dans la plage couverte par les tables, tolérance incluse."""
    day = _as_utc(instant).date()
    slack = timedelta(days=tolerance_days)
    return COVERED_FROM - slack <= day <= COVERED_UNTIL + slack


def warn_if_stale(
    instant: datetime, component: str, tolerance_days: int = DEFAULT_TOLERANCE_DAYS
) -> bool:
    """Signale une requête hors plage; retourne True si le modèle est périmé pour cet instant."""
    if model_is_current(instant, tolerance_days):
        return False
    log.warning(
        "stale_planet_model",
        component=component,
        instant=_as_utc(instant).isoformat(),
        covered_from=COVERED_FROM.isoformat(),
        covered_until=COVERED_UNTIL.isoformat(),
    )
    warnings.warn(
        f"planetary tables cover {COVERED_FROM}..{COVERED_UNTIL}; "
        f"{component} queried for {_as_utc(instant).date()}",
        StaleModelWarning,
        stacklevel=3,
    )
    return True


def current_positions(
    instant: datetime, tolerance_days: int = DEFAULT_TOLERANCE_DAYS
) -> list[PlanetaryPosition]:
    """
    Calculate approximate positions of the tracked planets.

    Args:
        instant: Instant de la requête (naïf = UTC).
        tolerance_days: Marge autour de la plage couverte avant avertissement.

    Returns:
        list[PlanetaryPosition]: une entrée par planète, dans l'ordre de `PLANETS`.
    """
    warn_if_stale(instant, "planets", tolerance_days)
    positions = []
    for planet in PLANETS:
        sign, degree = sign_and_degree(longitude_at(planet, instant))
        positions.append(
            PlanetaryPosition(
                planet=planet,
                sign=sign.value,
                degree=degree,
                retrograde=is_retrograde(planet, instant),
            )
        )
    return positions
