"""Dépôts de contenus quotidiens et mensuels.

Ce module implémente le collaborateur `ContentStore` des résolveurs: un dépôt basé sur un
fichier JSON et un dépôt en mémoire pour les tests. Les deux renvoient toutes les lignes d'une
(date, hémisphère); l'appariement du signe se fait côté domaine.

Format du fichier JSON:
    {"daily": [{"sign": ..., "hemisphere": ..., "date": "YYYY-MM-DD", ...}],
     "monthly": [{"sign": ..., "hemisphere": ..., "date": "YYYY-MM-01", ...}]}
"""

import json
import os
from collections.abc import Iterable

import structlog
from pydantic import ValidationError

from astrocusp.domain.entities import DailyContentRow, MonthlyForecastRow
from astrocusp.domain.errors import StoreUnavailable
from astrocusp.domain.sign_labels import hemisphere_variants
from astrocusp.domain.zodiac import Hemisphere

log = structlog.get_logger(__name__)


def _hemisphere_accepts(hemisphere: Hemisphere, stored: str) -> bool:
    return (stored or "").strip().lower() in {v.lower() for v in hemisphere_variants(hemisphere)}


def _select(rows: Iterable, date_str: str, hemisphere: Hemisphere) -> list:
    return [r for r in rows if r.date == date_str and _hemisphere_accepts(hemisphere, r.hemisphere)]


class JSONContentRepository:
    """Dépôt de contenus basé sur un fichier JSON.

    Le fichier est relu à chaque requête: une publication de contenu est visible sans redémarrage.
    Toute erreur de lecture ou de format est remontée en `StoreUnavailable`.
    """

    def __init__(self, path: str):
        """Initialise le dépôt et garantit l'existence du fichier.

        Paramètres:
        - path: chemin du fichier JSON contenant les lignes de contenu.
        """
        self.path = path
        if not os.path.exists(self.path):
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"daily": [], "monthly": []}, f)

    def _load(self, section: str) -> list[dict]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as err:
            log.error("content_store_read_failed", path=self.path, error=str(err))
            raise StoreUnavailable(f"cannot read content file {self.path}") from err
        return data.get(section, []) if isinstance(data, dict) else []

    def find_daily_rows(self, date_str: str, hemisphere: Hemisphere) -> list[DailyContentRow]:
        """Lignes quotidiennes de la date pour l'hémisphère (formes longue et courte)."""
        try:
            rows = [DailyContentRow.model_validate(r) for r in self._load("daily")]
        except ValidationError as err:
            raise StoreUnavailable("malformed daily content row") from err
        return _select(rows, date_str, hemisphere)

    def find_monthly_rows(self, month_str: str, hemisphere: Hemisphere) -> list[MonthlyForecastRow]:
        """Retourne les prévisions mensuelles (clé `YYYY-MM-01`) pour l'hémisphère."""
        try:
            rows = [MonthlyForecastRow.model_validate(r) for r in self._load("monthly")]
        except ValidationError as err:
            raise StoreUnavailable("malformed monthly content row") from err
        return _select(rows, month_str, hemisphere)


class InMemoryContentRepository:
    """Dépôt de contenus en mémoire (dev/tests)."""

    def __init__(
        self,
        daily: Iterable[DailyContentRow | dict] = (),
        monthly: Iterable[MonthlyForecastRow | dict] = (),
    ):
        self.daily = [DailyContentRow.model_validate(r) for r in daily]
        self.monthly = [MonthlyForecastRow.model_validate(r) for r in monthly]

    def add_daily(self, row: DailyContentRow | dict) -> None:
        self.daily.append(DailyContentRow.model_validate(row))

    def find_daily_rows(self, date_str: str, hemisphere: Hemisphere) -> list[DailyContentRow]:
        return _select(self.daily, date_str, hemisphere)

    def find_monthly_rows(self, month_str: str, hemisphere: Hemisphere) -> list[MonthlyForecastRow]:
        return _select(self.monthly, month_str, hemisphere)
