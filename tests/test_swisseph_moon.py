"""
Tests du fournisseur lunaire Swiss Ephemeris (backend Moshier, sans fichiers).

Les dates de référence sont des phases publiées: pleine lune du 25/01/2024 à 17:54 UTC,
nouvelle lune du 11/01/2024 à 11:57 UTC.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from astrocusp.domain.lunar import next_major_phase, phase_name
from astrocusp.infra.astro.swisseph_moon import SwissEphemerisMoon, julian_day_ut

J2000 = 2451545.0
FULL_MOON = datetime(2024, 1, 25, 17, 54, tzinfo=UTC)
NEW_MOON = datetime(2024, 1, 11, 11, 57, tzinfo=UTC)


def test_julian_day_of_j2000() -> None:
    assert julian_day_ut(datetime(2000, 1, 1, 12, tzinfo=UTC)) == pytest.approx(J2000)
    assert julian_day_ut(datetime(2000, 1, 1, 12)) == pytest.approx(J2000)


def test_full_moon_illumination() -> None:
    lit = SwissEphemerisMoon().illumination(FULL_MOON)
    assert lit.fraction > 0.99
    assert lit.phase == pytest.approx(0.5, abs=0.01)
    assert phase_name(lit.phase) == "Full Moon"


def test_new_moon_illumination() -> None:
    lit = SwissEphemerisMoon().illumination(NEW_MOON)
    assert lit.fraction < 0.01
    assert 0.0 <= lit.phase < 1.0
    assert phase_name(lit.phase) == "New Moon"


def test_next_full_moon_found_on_the_right_day() -> None:
    name, at = next_major_phase(datetime(2024, 1, 20, tzinfo=UTC), SwissEphemerisMoon())
    assert name == "Full Moon"
    assert at.date() == date(2024, 1, 25)
