"""Tests de l'estimation simplifiée de l'ascendant."""

from __future__ import annotations

import pytest

from astrocusp.domain.entities import BirthInfo
from astrocusp.domain.errors import InvalidDateError
from astrocusp.domain.rising import RISING_DESCRIPTIONS, resolve_rising, resolve_rising_for
from astrocusp.domain.zodiac import Sign

DEGREE_CAPRICORN_CASE = 27.0
DEGREE_LATE_NIGHT_CASE = 2.0


def test_midnight_first_day_is_aries_zero() -> None:
    result = resolve_rising("00:00", 1)
    assert result.sign == "Aries"
    assert result.degree == 0.0
    assert result.description == RISING_DESCRIPTIONS[Sign.ARIES]


def test_known_values() -> None:
    """Valeurs calculées à la main (signe par tranches de 120 min, degré par pas de 4 min)."""
    noon = resolve_rising("12:30", 100)
    assert noon.sign == "Capricorn"
    assert noon.degree == DEGREE_CAPRICORN_CASE

    late = resolve_rising("23:59", 366)
    assert late.sign == "Aries"
    assert late.degree == DEGREE_LATE_NIGHT_CASE


def test_birth_info_uses_day_of_year() -> None:
    """Le 9 avril 2024 est le 100e jour de l'année."""
    result = resolve_rising_for(BirthInfo(date="2024-04-09", time="12:30"))
    assert result.sign == "Capricorn"
    assert result.description == "Capricorn rising gives you an authoritative, responsible aura."


def test_degree_always_within_sign() -> None:
    for hour in range(24):
        for day in (1, 45, 180, 366):
            result = resolve_rising(f"{hour:02d}:17", day)
            assert 0 <= result.degree < 30
            assert Sign.from_name(result.sign) is not None


@pytest.mark.parametrize("value", ["25:00", "noon", "12", "12:61"])
def test_invalid_time_raises(value: str) -> None:
    with pytest.raises(InvalidDateError):
        resolve_rising(value, 10)


@pytest.mark.parametrize("day", [0, 367])
def test_day_of_year_out_of_range(day: int) -> None:
    with pytest.raises(InvalidDateError):
        resolve_rising("08:00", day)
