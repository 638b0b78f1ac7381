"""
Résolution calendaire du signe solaire et des cuspides.

Le signe est déduit de la seule date (jour/mois), à partir de deux tables fixes et
complémentaires (`CUSP_WINDOWS`, `STANDARD_WINDOWS`). Le degré solaire renvoyé est cosmétique:
il est tiré au hasard dans la bande correspondant au statut (cuspide ou pur), via une source
aléatoire injectable pour rendre les sorties reproductibles.
"""

import math
import random
from datetime import date, datetime

from astrocusp.domain.entities import CUSP_DEGREE_RANGE, PURE_DEGREE_RANGE, CuspResult
from astrocusp.domain.errors import InvalidDateError
from astrocusp.domain.zodiac import (
    CUSP_WINDOWS,
    STANDARD_WINDOWS,
    CuspWindow,
    Sign,
    SignWindow,
)

_DEFAULT_RNG = random.Random()


def parse_birth_date(value: date | str) -> date:
    """Convertit `YYYY-MM-DD` ou `DD/MM/YYYY` en `date`, sinon lève `InvalidDateError`."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value or "").strip()
    try:
        if "/" in raw:
            day, month, year = (int(part) for part in raw.split("/"))
            return date(year, month, day)
        return date.fromisoformat(raw)
    except ValueError as err:
        raise InvalidDateError(value) from err


def matching_windows(month: int, day: int) -> list[CuspWindow | SignWindow]:
    """Toutes les fenêtres (cuspide et pures) contenant ce jour; exactement une attendue."""
    windows: list[CuspWindow | SignWindow] = [*CUSP_WINDOWS, *STANDARD_WINDOWS]
    return [w for w in windows if w.window.contains(month, day)]


def find_cusp_window(month: int, day: int) -> CuspWindow | None:
    return next((c for c in CUSP_WINDOWS if c.window.contains(month, day)), None)


def sun_sign(value: date | str) -> Sign:
    """Signe « pur » de la date; pour un jour de cuspide, le premier signe de la paire."""
    d = parse_birth_date(value)
    cusp = find_cusp_window(d.month, d.day)
    if cusp is not None:
        return cusp.cusp.first
    window = next(s for s in STANDARD_WINDOWS if s.window.contains(d.month, d.day))
    return window.sign


def _degree_in(band: tuple[float, float], rng: random.Random) -> float:
    low, high = band
    # Arrondi vers le bas au dixième: reste dans [low, high)
    return math.floor((low + rng.random() * (high - low)) * 10) / 10


def resolve_cusp(value: date | str, rng: random.Random | None = None) -> CuspResult:
    """
    Détermine si une date de naissance tombe sur une cuspide.

    Args:
        value: Date de naissance (`date`, `YYYY-MM-DD` ou `DD/MM/YYYY`); l'heure est ignorée.
        rng: Source aléatoire pour le degré cosmétique (graine fixe en test).

    Returns:
        CuspResult: cuspide (paire de signes, nom composé) ou signe pur.

    Raises:
        InvalidDateError: si la date n'existe pas dans le calendrier.
    """
    d = parse_birth_date(value)
    rng = rng or _DEFAULT_RNG
    cusp = find_cusp_window(d.month, d.day)
    if cusp is not None:
        first, second = cusp.cusp.signs
        return CuspResult(
            is_on_cusp=True,
            primary_sign=first.value,
            secondary_sign=second.value,
            cusp_name=cusp.cusp.value,
            sun_degree=_degree_in(CUSP_DEGREE_RANGE, rng),
            description=(
                f"You are born on the {cusp.cusp.value}, {cusp.title}. This unique position "
                f"gives you traits from both {first.value} and {second.value}."
            ),
        )
    sign = sun_sign(d)
    return CuspResult(
        is_on_cusp=False,
        primary_sign=sign.value,
        sun_degree=_degree_in(PURE_DEGREE_RANGE, rng),
        description=f"You are a pure {sign.value}, embodying the full essence of this zodiac sign.",
    )
