"""
Résolution du contenu quotidien (et mensuel) pour un signe et un hémisphère.

Le dépôt de contenus est indexé par une date calendaire; comme l'utilisateur peut se trouver dans
n'importe quel fuseau, « aujourd'hui » est essayé sous plusieurs ancres successives. Pour chaque
ancre, l'ensemble des lignes (date, hémisphère) est chargé puis le signe est apparié localement
via `sign_labels`.

Règle de sûreté des cuspides: si aucune ligne ne correspond à la cuspide demandée mais que le jeu
contient au moins une ligne de cuspide, le résultat est None; le repli vers le signe pur n'a lieu
que si aucune cuspide n'est publiée pour cette date.
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from astrocusp.domain.entities import DailyContentRow, MonthlyForecastRow
from astrocusp.domain.sign_labels import (
    build_candidates,
    cusp_components,
    is_cusp_label,
    labels_match,
    normalize_hemisphere,
)
from astrocusp.domain.zodiac import Hemisphere

log = structlog.get_logger(__name__)


class ContentStore(Protocol):
    """Protocole du dépôt de contenus consommé par les résolveurs.

    Les implémentations lèvent `StoreUnavailable` sur erreur d'E/S; une liste vide signifie
    simplement qu'aucune ligne n'est publiée.
    """

    def find_daily_rows(self, date_str: str, hemisphere: Hemisphere) -> list[DailyContentRow]:
        """Toutes les lignes quotidiennes pour (date, hémisphère)."""

    def find_monthly_rows(self, month_str: str, hemisphere: Hemisphere) -> list[MonthlyForecastRow]:
        """Toutes les prévisions mensuelles pour (YYYY-MM-01, hémisphère)."""


def resolve_timezone(name: str | None, default: str = "UTC") -> tzinfo:
    """Fuseau IANA nommé, sinon `default`, sinon UTC."""
    for candidate in (name, default):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            log.debug("unknown_timezone", timezone=candidate)
    return UTC


def date_anchors(now: datetime, tz: tzinfo) -> list[str]:
    """
    Dates à essayer pour « aujourd'hui », dans l'ordre.

    Args:
        now: Instant courant (naïf = UTC).
        tz: Fuseau de l'utilisateur.

    Returns:
        list[str]: aujourd'hui local, aujourd'hui UTC, hier local, demain local (YYYY-MM-DD),
        sans doublons, ordre conservé.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local_today = now.astimezone(tz).date()
    anchors = [
        local_today,
        now.astimezone(UTC).date(),
        local_today - timedelta(days=1),
        local_today + timedelta(days=1),
    ]
    return list(dict.fromkeys(d.isoformat() for d in anchors))


def _first_match(rows: Sequence[DailyContentRow], candidates: list[str]):
    for candidate in candidates:
        for row in rows:
            if labels_match(row.sign, candidate):
                return row
    return None


def _is_cusp_row(row: DailyContentRow) -> bool:
    """Ligne de cuspide, y compris stockée sans le mot « Cusp » (ex. « Pisces-Aries »)."""
    return is_cusp_label(row.sign) or bool(cusp_components(row.sign))


def pick_row(
    rows: Sequence[DailyContentRow],
    requested_sign: str,
    allow_true_sign_fallback: bool = False,
):
    """
    Sélectionne la ligne correspondant au signe demandé dans un jeu (date, hémisphère).

    Args:
        rows: Lignes chargées pour une date et un hémisphère.
        requested_sign: Libellé demandé (cuspide ou signe pur).
        allow_true_sign_fallback: Pour une cuspide sans ligne de cuspide publiée, accepte aussi
            le second signe composant (le premier est toujours essayé).

    Returns:
        La ligne retenue, ou None.
    """
    candidates = build_candidates(requested_sign)
    if not candidates:
        return None
    row = _first_match(rows, candidates)
    if row is not None or not is_cusp_label(requested_sign):
        return row
    if any(_is_cusp_row(r) for r in rows):
        return None
    components = cusp_components(requested_sign)
    fallback = components if allow_true_sign_fallback else components[:1]
    return _first_match(rows, fallback)


class DailyContentResolver:
    """Résout la ligne de contenu quotidien d'un utilisateur.

    Collaborateur unique: un `ContentStore`. `StoreUnavailable` n'est jamais converti en
    « introuvable »: l'appelant doit distinguer « réessayer » de « rien de publié ».
    """

    def __init__(
        self,
        store: ContentStore,
        default_timezone: str = "UTC",
        allow_true_sign_fallback: bool = False,
    ):
        self.store = store
        self.default_timezone = default_timezone
        self.allow_true_sign_fallback = allow_true_sign_fallback

    def anchors_for(
        self, day: date | str | None, timezone: str | None, now: datetime | None
    ) -> list[str]:
        if day is not None:
            return [day.isoformat() if isinstance(day, date) else str(day)]
        tz = resolve_timezone(timezone, self.default_timezone)
        return date_anchors(now or datetime.now(UTC), tz)

    def resolve(
        self,
        requested_sign: str,
        hemisphere: Hemisphere | str,
        day: date | str | None = None,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> DailyContentRow | None:
        """
        Resolve the daily content row for a sign.

        Args:
            requested_sign: Libellé du signe ou de la cuspide.
            hemisphere: Hémisphère (forme longue ou courte).
            day: Date explicite; sinon ancres autour d'« aujourd'hui ».
            timezone: Fuseau IANA de l'utilisateur (repli sur le fuseau par défaut).
            now: Instant courant (injectable pour les tests).

        Returns:
            DailyContentRow | None: première ligne trouvée en parcourant les ancres, ou None.

        Raises:
            StoreUnavailable: si le dépôt est injoignable.
        """
        hemi = normalize_hemisphere(hemisphere)
        anchors = self.anchors_for(day, timezone, now)
        for anchor in anchors:
            rows = self.store.find_daily_rows(anchor, hemi)
            row = pick_row(rows, requested_sign, self.allow_true_sign_fallback)
            if row is not None:
                log.info(
                    "daily_content_matched",
                    sign=requested_sign,
                    row_sign=row.sign,
                    hemisphere=hemi.value,
                    date=anchor,
                )
                return row
        log.info(
            "daily_content_not_found",
            sign=requested_sign,
            hemisphere=hemi.value,
            anchors=anchors,
        )
        return None


def month_key(day: date) -> str:
    """Clé mensuelle `YYYY-MM-01`."""
    return day.replace(day=1).isoformat()


class MonthlyForecastResolver:
    """Résout la prévision mensuelle; les signes composants d'une cuspide sont acceptés."""

    def __init__(self, store: ContentStore, default_timezone: str = "UTC"):
        self.store = store
        self.default_timezone = default_timezone

    def resolve(
        self,
        requested_sign: str,
        hemisphere: Hemisphere | str,
        month: date | None = None,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> MonthlyForecastRow | None:
        hemi = normalize_hemisphere(hemisphere)
        if month is None:
            tz = resolve_timezone(timezone, self.default_timezone)
            now = now or datetime.now(UTC)
            if now.tzinfo is None:
                now = now.replace(tzinfo=UTC)
            month = now.astimezone(tz).date()
        key = month_key(month)
        rows = self.store.find_monthly_rows(key, hemi)
        candidates = build_candidates(requested_sign, allow_single_sign_fallback=True)
        row = _first_match(rows, candidates)
        log.info(
            "monthly_forecast_matched" if row else "monthly_forecast_not_found",
            sign=requested_sign,
            hemisphere=hemi.value,
            month=key,
        )
        return row
