# Schémas Pydantic exposés par l'API (réponses composées).

from pydantic import BaseModel

from astrocusp.domain.entities import AstronomicalEvent, CuspResult, PlanetaryPosition


class CuspResponse(CuspResult):
    """Identité solaire enrichie du signe effectif utilisé pour le contenu.

    Champs supplémentaires:
    - effective_sign: str (nom de cuspide si en cuspide, sinon signe principal)
    - slug: str (forme URL du signe effectif)
    """

    effective_sign: str
    slug: str


class PlanetsResponse(BaseModel):
    """Positions planétaires approchées.

    Champs:
    - positions: list[PlanetaryPosition]
    - stale_model: bool (instant hors de la plage couverte par les tables)
    """

    positions: list[PlanetaryPosition]
    stale_model: bool


class EventsResponse(BaseModel):
    hemisphere: str
    window_days: int
    events: list[AstronomicalEvent]


class InsightResponse(BaseModel):
    hemisphere: str
    insight: str
    constellations: list[str]
