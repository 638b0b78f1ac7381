"""
Phase lunaire courante et recherche de la prochaine phase majeure.

Le calcul brut (fraction éclairée, fraction de phase) est délégué à un collaborateur
`MoonIllumination`; ce module ne fait que nommer la phase et balayer le temps heure par heure.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Protocol

import structlog

from astrocusp.domain.entities import MajorPhase, MoonPhase

log = structlog.get_logger(__name__)

PHASE_TOLERANCE = 0.0125
SEARCH_TOLERANCE = 0.005
SEARCH_STEP = timedelta(hours=1)
MAX_SEARCH_STEPS = 35 * 24
FALLBACK_DELAY = timedelta(days=14)

MAJOR_PHASES: tuple[tuple[MajorPhase, float], ...] = (
    ("New Moon", 0.0),
    ("First Quarter", 0.25),
    ("Full Moon", 0.5),
    ("Last Quarter", 0.75),
)


@dataclass(frozen=True)
class Illumination:
    fraction: float  # part éclairée du disque, [0, 1]
    phase: float  # 0 = nouvelle lune, 0.5 = pleine lune, [0, 1)


class MoonIllumination(Protocol):
    """Protocole des fournisseurs d'éclairement lunaire."""

    def illumination(self, instant: datetime) -> Illumination:
        """Retourne l'éclairement de la Lune à l'instant donné (UTC)."""


def phase_name(phase: float) -> str:
    """
    Nomme une fraction de phase.

    Les valeurs à moins de 0.0125 d'un quartier prennent le nom du quartier; les autres tombent
    dans le croissant ou la gibbeuse correspondant.
    """
    if phase < PHASE_TOLERANCE or phase > 1 - PHASE_TOLERANCE:
        return "New Moon"
    for name, target in MAJOR_PHASES[1:]:
        if abs(phase - target) < PHASE_TOLERANCE:
            return name
    if phase < 0.25:
        return "Waxing Crescent"
    if phase < 0.5:
        return "Waxing Gibbous"
    if phase < 0.75:
        return "Waning Gibbous"
    return "Waning Crescent"


def _distance_ahead(phase: float, target: float) -> float:
    """Chemin restant avant `target` en avançant dans le cycle (gère le passage 1.0 -> 0.0)."""
    return (target - phase) % 1.0


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def next_major_phase(instant: datetime, moon: MoonIllumination) -> tuple[MajorPhase, datetime]:
    """
    Cherche la prochaine nouvelle lune, quartier ou pleine lune après `instant`.

    Args:
        instant: Point de départ de la recherche.
        moon: Fournisseur d'éclairement.

    Returns:
        tuple[MajorPhase, datetime]: phase atteinte et premier échantillon horaire (UTC) où elle
        est franchie ou approchée à moins de 0.005. Sans résultat sur 35 jours, retourne
        « Full Moon » à +14 jours et journalise `moon_phase_search_fallback`.
    """
    start = _as_utc(instant)
    previous = moon.illumination(start).phase
    for step in range(1, MAX_SEARCH_STEPS + 1):
        t = start + step * SEARCH_STEP
        current = moon.illumination(t).phase
        for name, target in MAJOR_PHASES:
            ahead = _distance_ahead(current, target)
            behind = _distance_ahead(previous, target)
            # franchi entre deux échantillons: la distance restante saute de ~0 à ~1.
            # Un départ déjà sur la cible (behind < tolérance) ne compte pas.
            crossed = behind >= SEARCH_TOLERANCE and ahead - behind > 0.5
            if crossed or ahead < SEARCH_TOLERANCE:
                return name, t
        previous = current
    log.warning("moon_phase_search_fallback", start=start.isoformat(), steps=MAX_SEARCH_STEPS)
    return "Full Moon", start + FALLBACK_DELAY


def iter_major_phases(
    instant: datetime, moon: MoonIllumination
) -> Iterator[tuple[MajorPhase, datetime]]:
    """Enchaîne les phases majeures successives à partir de `instant`."""
    cursor = _as_utc(instant)
    while True:
        name, found = next_major_phase(cursor, moon)
        yield name, found
        # les quartiers sont espacés d'environ 7 jours
        cursor = found + timedelta(days=1)


def current_moon_phase(
    instant: datetime, moon: MoonIllumination, tz: tzinfo = UTC
) -> MoonPhase:
    """
    Calculate the current moon phase.

    Args:
        instant: Instant de la requête.
        moon: Fournisseur d'éclairement.
        tz: Fuseau utilisé pour exprimer la date de la prochaine phase.

    Returns:
        MoonPhase: nom de phase, pourcentage éclairé arrondi, prochaine phase majeure et sa date.
    """
    lit = moon.illumination(_as_utc(instant))
    next_name, next_at = next_major_phase(instant, moon)
    return MoonPhase(
        phase_name=phase_name(lit.phase),
        illumination_percent=min(100, max(0, int(lit.fraction * 100 + 0.5))),
        next_phase_name=next_name,
        next_phase_date=next_at.astimezone(tz).date(),
    )
