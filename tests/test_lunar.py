"""
Tests des phases lunaires.

Ce module teste le nommage des phases, la recherche horaire de la prochaine phase majeure (avec
un fournisseur linéaire contrôlé et la Lune moyenne) et le repli quand aucune phase n'est trouvée.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from unittest.mock import Mock

import pytest

from astrocusp.domain import lunar
from astrocusp.domain.lunar import (
    FALLBACK_DELAY,
    Illumination,
    current_moon_phase,
    iter_major_phases,
    next_major_phase,
    phase_name,
)
from astrocusp.infra.astro.mean_synodic import (
    REFERENCE_NEW_MOON,
    SYNODIC_MONTH_DAYS,
    MeanSynodicMoon,
)

START = datetime(2025, 11, 1, tzinfo=UTC)
MAX_EARLY_DETECTION = timedelta(hours=4)


class LinearMoon:
    """Fournisseur de test: la phase avance d'un pas fixe par heure depuis `START`."""

    def __init__(self, phase0: float, per_hour: float) -> None:
        self.phase0 = phase0
        self.per_hour = per_hour

    def illumination(self, instant: datetime) -> Illumination:
        hours = (instant - START).total_seconds() / 3600.0
        return Illumination(fraction=0.5, phase=(self.phase0 + hours * self.per_hour) % 1.0)


@pytest.mark.parametrize(
    ("phase", "expected"),
    [
        (0.0, "New Moon"),
        (0.0124, "New Moon"),
        (0.99, "New Moon"),
        (0.0126, "Waxing Crescent"),
        (0.1, "Waxing Crescent"),
        (0.25, "First Quarter"),
        (0.4, "Waxing Gibbous"),
        (0.5, "Full Moon"),
        (0.6, "Waning Gibbous"),
        (0.75, "Last Quarter"),
        (0.9, "Waning Crescent"),
    ],
)
def test_phase_name(phase: float, expected: str) -> None:
    assert phase_name(phase) == expected


def test_next_phase_detects_crossing() -> None:
    """Une phase qui passe 0.25 entre deux échantillons donne le premier quartier."""
    name, at = next_major_phase(START, LinearMoon(0.2, 0.01))
    assert name == "First Quarter"
    assert at == START + timedelta(hours=5)


def test_next_phase_handles_wrap_to_new_moon() -> None:
    name, at = next_major_phase(START, LinearMoon(0.98, 0.01))
    assert name == "New Moon"
    assert at == START + timedelta(hours=2)


def test_starting_on_a_phase_finds_the_following_one() -> None:
    """Partir exactement d'une pleine lune ne la redétecte pas une heure plus tard."""
    name, _ = next_major_phase(START, LinearMoon(0.5, 0.01))
    assert name == "Last Quarter"


def test_constant_phase_falls_back(monkeypatch) -> None:
    """Sans franchissement sur 35 jours: « Full Moon » à +14 jours, journalisé."""
    fake_log = Mock()
    monkeypatch.setattr(lunar, "log", fake_log)
    moon = Mock()
    moon.illumination.return_value = Illumination(fraction=0.3, phase=0.3)

    name, at = next_major_phase(START, moon)

    assert name == "Full Moon"
    assert at == START + FALLBACK_DELAY
    fake_log.warning.assert_called_once()
    assert fake_log.warning.call_args.args[0] == "moon_phase_search_fallback"


def test_mean_moon_first_quarter_timing(mean_moon: MeanSynodicMoon) -> None:
    """Avec la Lune moyenne, le premier quartier tombe à un quart de cycle (à l'heure près)."""
    expected = REFERENCE_NEW_MOON + timedelta(days=SYNODIC_MONTH_DAYS / 4)
    name, at = next_major_phase(REFERENCE_NEW_MOON + timedelta(days=1), mean_moon)
    assert name == "First Quarter"
    assert abs(at - expected) <= MAX_EARLY_DETECTION


def test_iter_major_phases_cycles_in_order(mean_moon: MeanSynodicMoon) -> None:
    start = REFERENCE_NEW_MOON + timedelta(days=1)
    names = []
    for name, _ in iter_major_phases(start, mean_moon):
        names.append(name)
        if len(names) == 5:
            break
    assert names == ["First Quarter", "Full Moon", "Last Quarter", "New Moon", "First Quarter"]


def test_current_moon_phase_at_full_moon(mean_moon: MeanSynodicMoon) -> None:
    instant = REFERENCE_NEW_MOON + timedelta(days=SYNODIC_MONTH_DAYS / 2)
    result = current_moon_phase(instant, mean_moon)
    assert result.phase_name == "Full Moon"
    assert result.illumination_percent == 100
    assert result.next_phase_name == "Last Quarter"
    assert result.next_phase_date == date(2000, 1, 28)


def test_mean_moon_reference_is_new(mean_moon: MeanSynodicMoon) -> None:
    lit = mean_moon.illumination(REFERENCE_NEW_MOON)
    assert lit.phase == pytest.approx(0.0)
    assert lit.fraction == pytest.approx(0.0)
