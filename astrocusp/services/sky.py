"""Service « ciel courant »: planètes, Lune, évènements et phrase de synthèse.

Chaque requête vérifie que l'instant reste dans la plage couverte par les tables planétaires;
hors plage, le résultat est tout de même calculé mais signalé (`stale_model`), journalisé et
compté.
"""

from datetime import UTC, datetime, tzinfo
from typing import Any

from astrocusp.app.metrics import STALE_MODEL_QUERIES
from astrocusp.domain.entities import AstronomicalEvent, MoonPhase
from astrocusp.domain.events import sky_insight, upcoming_events, visible_constellations
from astrocusp.domain.lunar import MoonIllumination, current_moon_phase
from astrocusp.domain.planets import current_positions, model_is_current, warn_if_stale
from astrocusp.domain.sign_labels import normalize_hemisphere
from astrocusp.domain.zodiac import Hemisphere


class SkyService:
    """Orchestration des calculs du ciel pour l'API."""

    def __init__(
        self,
        moon: MoonIllumination,
        tz: tzinfo = UTC,
        window_days: int = 45,
        tolerance_days: int = 90,
    ):
        """Initialise le service.

        Paramètres:
        - moon: fournisseur d'éclairement lunaire (Swiss Ephemeris ou cycle moyen).
        - tz: fuseau servant à dater phases et évènements.
        - window_days: largeur de la fenêtre d'évènements.
        - tolerance_days: marge autour de la plage des tables planétaires.
        """
        self.moon = moon
        self.tz = tz
        self.window_days = window_days
        self.tolerance_days = tolerance_days

    def _now(self, now: datetime | None) -> datetime:
        now = now or datetime.now(UTC)
        return now if now.tzinfo else now.replace(tzinfo=UTC)

    def planets(self, now: datetime | None = None) -> dict[str, Any]:
        now = self._now(now)
        stale = not model_is_current(now, self.tolerance_days)
        positions = current_positions(now, self.tolerance_days)
        if stale:
            STALE_MODEL_QUERIES.labels("planets").inc()
        return {"positions": positions, "stale_model": stale}

    def moon_phase(self, now: datetime | None = None) -> MoonPhase:
        return current_moon_phase(self._now(now), self.moon, self.tz)

    def events(
        self, hemisphere: Hemisphere | str, now: datetime | None = None
    ) -> list[AstronomicalEvent]:
        now = self._now(now)
        if warn_if_stale(now, "events", self.tolerance_days):
            STALE_MODEL_QUERIES.labels("events").inc()
        return upcoming_events(
            normalize_hemisphere(hemisphere), now, self.moon, self.window_days, self.tz
        )

    def constellations(
        self, hemisphere: Hemisphere | str, now: datetime | None = None
    ) -> list[str]:
        month = self._now(now).astimezone(self.tz).month
        return visible_constellations(normalize_hemisphere(hemisphere), month)

    def insight(self, hemisphere: Hemisphere | str, now: datetime | None = None) -> str:
        """Phrase de synthèse pour l'hémisphère (phase lunaire + prochain évènement)."""
        now = self._now(now)
        hemi = normalize_hemisphere(hemisphere)
        return sky_insight(hemi, self.moon_phase(now), self.events(hemi, now))
