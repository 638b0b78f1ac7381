"""
Entités du domaine métier.

Ce module définit les structures échangées par le moteur de résolution signe/date: entrée de
naissance, identités calculées (cuspide, ascendant), ciel courant et lignes de contenu.
Aucune de ces entités n'est persistée par le cœur; elles sont calculées, utilisées puis jetées.
"""

from datetime import date as _date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from astrocusp.domain.zodiac import Hemisphere

CUSP_DEGREE_RANGE = (28.5, 30.5)
PURE_DEGREE_RANGE = (2.5, 27.5)

EventKind = Literal["moon", "planet", "meteor", "solstice", "equinox", "conjunction", "comet"]
HemisphereScope = Literal["Northern", "Southern", "Both"]
MajorPhase = Literal["New Moon", "First Quarter", "Full Moon", "Last Quarter"]


class BirthInfo(BaseModel):
    """Données de naissance pour le calcul d'identité astrologique."""

    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD ou DD/MM/YYYY
    time: str  # HH:MM
    location: str = ""
    hemisphere: Hemisphere = Hemisphere.NORTHERN
    timezone: str | None = None  # IANA TZ
    latitude: float | None = None
    longitude: float | None = None


class CuspResult(BaseModel):
    """Identité solaire: signe pur ou cuspide entre deux signes."""

    is_on_cusp: bool
    primary_sign: str
    secondary_sign: str | None = None
    cusp_name: str | None = None
    sun_degree: float
    description: str

    @model_validator(mode="after")
    def _check_cusp_consistency(self) -> "CuspResult":
        if self.is_on_cusp and not (self.secondary_sign and self.cusp_name):
            raise ValueError("cusp result requires secondary_sign and cusp_name")
        if not self.is_on_cusp and (self.secondary_sign or self.cusp_name):
            raise ValueError("pure sign result cannot carry secondary_sign or cusp_name")
        low, high = CUSP_DEGREE_RANGE if self.is_on_cusp else PURE_DEGREE_RANGE
        if not low <= self.sun_degree < high:
            raise ValueError(f"sun_degree {self.sun_degree} outside [{low}, {high})")
        return self


class RisingSignResult(BaseModel):
    """Ascendant estimé (modèle simplifié, sans géométrie d'horizon)."""

    sign: str
    degree: float = Field(ge=0, lt=30)
    description: str


class PlanetaryPosition(BaseModel):
    """Position approchée d'une planète à un instant donné."""

    planet: str
    sign: str
    degree: float = Field(ge=0, lt=30)
    retrograde: bool


class MoonPhase(BaseModel):
    """Phase lunaire courante et prochaine phase majeure."""

    phase_name: str
    illumination_percent: int = Field(ge=0, le=100)
    next_phase_name: MajorPhase
    next_phase_date: _date


class AstronomicalEvent(BaseModel):
    """Évènement du ciel dans la fenêtre glissante (jamais persisté)."""

    name: str
    description: str
    date: _date
    hemisphere_scope: HemisphereScope = "Both"
    kind: EventKind


class DailyContentRow(BaseModel):
    """Ligne de contenu quotidien telle que renvoyée par le dépôt.

    Seuls `sign`, `hemisphere` et `date` sont interprétés; les champs texte sont opaques et
    des colonnes supplémentaires sont conservées telles quelles.
    """

    model_config = ConfigDict(extra="allow")

    sign: str
    hemisphere: str
    date: str  # YYYY-MM-DD
    daily_horoscope: str = ""
    affirmation: str = ""
    deeper_insight: str = ""
    celestial_insight: str = ""


class MonthlyForecastRow(BaseModel):
    """Prévision mensuelle, indexée par le premier jour du mois."""

    model_config = ConfigDict(extra="allow")

    sign: str
    hemisphere: str
    date: str  # YYYY-MM-01
    monthly_forecast: str = ""
