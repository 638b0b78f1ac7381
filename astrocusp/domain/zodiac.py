"""
Identités canoniques du zodiaque: signes, cuspides, hémisphères et tables calendaires.

Les libellés externes (saisie utilisateur, lignes du dépôt de contenus) sont traduits vers ces
énumérations par `astrocusp.domain.sign_labels`; le reste du domaine ne manipule que ces types.

Les deux tables calendaires sont complémentaires: les 12 fenêtres de cuspide et les 12 fenêtres
« pures » couvrent chacune des 366 dates possibles exactement une fois.
"""

from dataclasses import dataclass
from enum import Enum

EN_DASH = "–"


class Sign(str, Enum):
    """Les douze signes du zodiaque tropical, dans l'ordre écliptique."""

    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"

    @property
    def index(self) -> int:
        return ZODIAC_ORDER.index(self)

    @classmethod
    def from_index(cls, index: int) -> "Sign":
        return ZODIAC_ORDER[index % 12]

    @classmethod
    def from_name(cls, name: str) -> "Sign | None":
        """Retourne le signe correspondant (insensible à la casse), sinon None."""
        key = (name or "").strip().lower()
        return next((s for s in ZODIAC_ORDER if s.value.lower() == key), None)


ZODIAC_ORDER: tuple[Sign, ...] = tuple(Sign)


class Cusp(str, Enum):
    """Les douze cuspides entre signes adjacents; la valeur est le libellé d'affichage."""

    PISCES_ARIES = f"Pisces{EN_DASH}Aries Cusp"
    ARIES_TAURUS = f"Aries{EN_DASH}Taurus Cusp"
    TAURUS_GEMINI = f"Taurus{EN_DASH}Gemini Cusp"
    GEMINI_CANCER = f"Gemini{EN_DASH}Cancer Cusp"
    CANCER_LEO = f"Cancer{EN_DASH}Leo Cusp"
    LEO_VIRGO = f"Leo{EN_DASH}Virgo Cusp"
    VIRGO_LIBRA = f"Virgo{EN_DASH}Libra Cusp"
    LIBRA_SCORPIO = f"Libra{EN_DASH}Scorpio Cusp"
    SCORPIO_SAGITTARIUS = f"Scorpio{EN_DASH}Sagittarius Cusp"
    SAGITTARIUS_CAPRICORN = f"Sagittarius{EN_DASH}Capricorn Cusp"
    CAPRICORN_AQUARIUS = f"Capricorn{EN_DASH}Aquarius Cusp"
    AQUARIUS_PISCES = f"Aquarius{EN_DASH}Pisces Cusp"

    @property
    def signs(self) -> tuple[Sign, Sign]:
        first, second = self.value.removesuffix(" Cusp").split(EN_DASH)
        return Sign(first), Sign(second)

    @property
    def first(self) -> Sign:
        return self.signs[0]

    @property
    def second(self) -> Sign:
        return self.signs[1]

    @classmethod
    def between(cls, first: Sign, second: Sign) -> "Cusp | None":
        """Cuspide formée par deux signes dans l'ordre donné, ou None s'ils ne se suivent pas."""
        return next((c for c in cls if c.signs == (first, second)), None)


class Hemisphere(str, Enum):
    """Hémisphère de l'utilisateur; `code` est la forme courte stockée côté contenus."""

    NORTHERN = "Northern"
    SOUTHERN = "Southern"

    @property
    def code(self) -> str:
        return "NH" if self is Hemisphere.NORTHERN else "SH"


@dataclass(frozen=True)
class DayWindow:
    """Plage inclusive (mois, jour) -> (mois, jour), sur un mois ou deux mois adjacents."""

    start_month: int
    start_day: int
    end_month: int
    end_day: int

    def contains(self, month: int, day: int) -> bool:
        if self.start_month == self.end_month:
            return month == self.start_month and self.start_day <= day <= self.end_day
        return (month == self.start_month and day >= self.start_day) or (
            month == self.end_month and day <= self.end_day
        )


@dataclass(frozen=True)
class CuspWindow:
    cusp: Cusp
    window: DayWindow
    title: str


@dataclass(frozen=True)
class SignWindow:
    sign: Sign
    window: DayWindow


CUSP_WINDOWS: tuple[CuspWindow, ...] = (
    CuspWindow(Cusp.PISCES_ARIES, DayWindow(3, 19, 3, 24), "The Cusp of Rebirth"),
    CuspWindow(Cusp.ARIES_TAURUS, DayWindow(4, 19, 4, 24), "The Cusp of Power"),
    CuspWindow(Cusp.TAURUS_GEMINI, DayWindow(5, 19, 5, 24), "The Cusp of Energy"),
    CuspWindow(Cusp.GEMINI_CANCER, DayWindow(6, 19, 6, 24), "The Cusp of Magic"),
    CuspWindow(Cusp.CANCER_LEO, DayWindow(7, 19, 7, 25), "The Cusp of Oscillation"),
    CuspWindow(Cusp.LEO_VIRGO, DayWindow(8, 19, 8, 25), "The Cusp of Exposure"),
    CuspWindow(Cusp.VIRGO_LIBRA, DayWindow(9, 19, 9, 25), "The Cusp of Beauty"),
    CuspWindow(Cusp.LIBRA_SCORPIO, DayWindow(10, 19, 10, 25), "The Cusp of Drama & Criticism"),
    CuspWindow(Cusp.SCORPIO_SAGITTARIUS, DayWindow(11, 18, 11, 24), "The Cusp of Revolution"),
    CuspWindow(Cusp.SAGITTARIUS_CAPRICORN, DayWindow(12, 18, 12, 24), "The Cusp of Prophecy"),
    CuspWindow(
        Cusp.CAPRICORN_AQUARIUS, DayWindow(1, 17, 1, 23), "The Cusp of Mystery & Imagination"
    ),
    CuspWindow(Cusp.AQUARIUS_PISCES, DayWindow(2, 15, 2, 21), "The Cusp of Sensitivity"),
)

# Jours hors cuspide: l'intervalle entre deux fenêtres de cuspide successives.
STANDARD_WINDOWS: tuple[SignWindow, ...] = (
    SignWindow(Sign.ARIES, DayWindow(3, 25, 4, 18)),
    SignWindow(Sign.TAURUS, DayWindow(4, 25, 5, 18)),
    SignWindow(Sign.GEMINI, DayWindow(5, 25, 6, 18)),
    SignWindow(Sign.CANCER, DayWindow(6, 25, 7, 18)),
    SignWindow(Sign.LEO, DayWindow(7, 26, 8, 18)),
    SignWindow(Sign.VIRGO, DayWindow(8, 26, 9, 18)),
    SignWindow(Sign.LIBRA, DayWindow(9, 26, 10, 18)),
    SignWindow(Sign.SCORPIO, DayWindow(10, 26, 11, 17)),
    SignWindow(Sign.SAGITTARIUS, DayWindow(11, 25, 12, 17)),
    SignWindow(Sign.CAPRICORN, DayWindow(12, 25, 1, 16)),
    SignWindow(Sign.AQUARIUS, DayWindow(1, 24, 2, 14)),
    SignWindow(Sign.PISCES, DayWindow(2, 22, 3, 18)),
)
