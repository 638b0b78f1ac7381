"""Estimation de l'ascendant.

Modèle volontairement simplifié (« divertissement »), sans latitude, temps sidéral ni géométrie
d'horizon: le signe et le degré dérivent de l'heure locale et du jour de l'année par arithmétique
modulaire. Les résultats affichés en dépendent; ne pas le remplacer par un calcul réel.
"""

from datetime import time

from astrocusp.domain.cusp_resolver import parse_birth_date
from astrocusp.domain.entities import BirthInfo, RisingSignResult
from astrocusp.domain.errors import InvalidDateError
from astrocusp.domain.zodiac import Sign

RISING_DESCRIPTIONS: dict[Sign, str] = {
    Sign.ARIES: "Your Aries rising gives you a bold, energetic first impression.",
    Sign.TAURUS: "With Taurus rising, you project stability and reliability.",
    Sign.GEMINI: "Your Gemini rising makes you appear curious and communicative.",
    Sign.CANCER: "Cancer rising gives you a nurturing, protective aura.",
    Sign.LEO: "With Leo rising, you have a magnetic, confident presence.",
    Sign.VIRGO: "Your Virgo rising projects competence and attention to detail.",
    Sign.LIBRA: "Libra rising gives you a charming, diplomatic appearance.",
    Sign.SCORPIO: "With Scorpio rising, you have an intense, mysterious presence.",
    Sign.SAGITTARIUS: "Your Sagittarius rising makes you appear adventurous.",
    Sign.CAPRICORN: "Capricorn rising gives you an authoritative, responsible aura.",
    Sign.AQUARIUS: "With Aquarius rising, you appear unique and forward-thinking.",
    Sign.PISCES: "Your Pisces rising gives you a dreamy, compassionate presence.",
}


def parse_birth_time(value: time | str) -> time:
    """Convertit `HH:MM` (secondes tolérées) en `time`, sinon lève `InvalidDateError`."""
    if isinstance(value, time):
        return value
    raw = str(value or "").strip()
    try:
        parts = [int(p) for p in raw.split(":")]
        if len(parts) not in (2, 3):
            raise ValueError(raw)
        return time(*parts)
    except ValueError as err:
        raise InvalidDateError(value, "invalid time of day") from err


def resolve_rising(birth_time: time | str, day_of_year: int) -> RisingSignResult:
    """
    Calcule l'ascendant estimé.

    Args:
        birth_time: Heure locale de naissance.
        day_of_year: Jour de l'année (1..366).

    Returns:
        RisingSignResult: signe, degré entier dans le signe et description.
    """
    t = parse_birth_time(birth_time)
    if not 1 <= int(day_of_year) <= 366:
        raise InvalidDateError(day_of_year, "day of year out of range")
    minutes = t.hour * 60 + t.minute
    sign = Sign.from_index(((minutes + day_of_year * 4) // 120) % 12)
    degree = ((minutes + day_of_year * 2) % 120) // 4
    description = RISING_DESCRIPTIONS.get(sign, f"Your rising sign is {sign.value}.")
    return RisingSignResult(sign=sign.value, degree=float(degree), description=description)


def resolve_rising_for(birth: BirthInfo) -> RisingSignResult:
    """Variante à partir d'un `BirthInfo` (jour de l'année tiré de la date locale)."""
    d = parse_birth_date(birth.date)
    return resolve_rising(birth.time, d.timetuple().tm_yday)
