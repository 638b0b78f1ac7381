"""
Routes « ciel courant »: planètes, phase lunaire, évènements à venir et synthèse.

Tous les endpoints acceptent un paramètre `at` (ISO 8601) pour interroger un autre instant que
maintenant; l'hémisphère accepte les formes longues et courtes (`Southern`, `SH`).
"""

from datetime import datetime

from fastapi import APIRouter

from astrocusp.api.schemas import EventsResponse, InsightResponse, PlanetsResponse
from astrocusp.core.container import container
from astrocusp.domain.entities import MoonPhase
from astrocusp.domain.sign_labels import normalize_hemisphere

router = APIRouter(prefix="/sky", tags=["sky"])


@router.get("/planets", response_model=PlanetsResponse)
def get_planets(at: datetime | None = None):
    return container.sky.planets(at)


@router.get("/moon", response_model=MoonPhase)
def get_moon(at: datetime | None = None):
    return container.sky.moon_phase(at)


@router.get("/events", response_model=EventsResponse)
def get_events(hemisphere: str = "Northern", at: datetime | None = None):
    """Évènements des prochains jours (fenêtre `EVENT_WINDOW_DAYS`) pour l'hémisphère."""
    hemi = normalize_hemisphere(hemisphere)
    return EventsResponse(
        hemisphere=hemi.value,
        window_days=container.sky.window_days,
        events=container.sky.events(hemi, at),
    )


@router.get("/insight", response_model=InsightResponse)
def get_insight(hemisphere: str = "Northern", at: datetime | None = None):
    hemi = normalize_hemisphere(hemisphere)
    return InsightResponse(
        hemisphere=hemi.value,
        insight=container.sky.insight(hemi, at),
        constellations=container.sky.constellations(hemi, at),
    )
