# ============================================================
# Module : astrocusp/services/content.py
# Objet  : Contenu quotidien/mensuel avec cache et single-flight.
# Contexte : Orchestration au-dessus des résolveurs du domaine.
# Invariants :
#  - Seules les résolutions réussies sont mises en cache.
#  - Au plus une résolution en vol par (signe, hémisphère, date).
#  - StoreUnavailable n'est jamais converti en « introuvable ».
# ============================================================
"""Service de contenu: cache, dédoublonnage et métriques autour des résolveurs.

Les résolveurs du domaine restent purs (un seul collaborateur, le dépôt); ce service ajoute le
cache versionné, la garde single-flight et le comptage Prometheus des issues.
"""

from datetime import UTC, date, datetime

import structlog

from astrocusp.app.metrics import DAILY_CONTENT_LOOKUPS
from astrocusp.domain.daily_resolver import (
    DailyContentResolver,
    MonthlyForecastResolver,
    resolve_timezone,
)
from astrocusp.domain.entities import DailyContentRow, MonthlyForecastRow
from astrocusp.domain.errors import StoreUnavailable
from astrocusp.domain.sign_labels import normalize_hemisphere, slugify_sign
from astrocusp.domain.singleflight import KeyedSingleFlight
from astrocusp.domain.zodiac import Hemisphere
from astrocusp.infra.repositories import daily_cache_key

log = structlog.get_logger(__name__)


class ContentService:
    """Accès au contenu quotidien et mensuel pour un signe."""

    def __init__(
        self,
        daily: DailyContentResolver,
        monthly: MonthlyForecastResolver,
        cache,
        flight: KeyedSingleFlight | None = None,
    ):
        """Initialise le service avec ses dépendances.

        Paramètres:
        - daily: résolveur du contenu quotidien.
        - monthly: résolveur des prévisions mensuelles.
        - cache: cache des lignes résolues (InMemory ou Redis).
        - flight: garde single-flight partagée (une instance par processus).
        """
        self.daily_resolver = daily
        self.monthly_resolver = monthly
        self.cache = cache
        self.flight = flight or KeyedSingleFlight()

    def _cache_date(self, day: date | None, timezone: str | None, now: datetime) -> str:
        if day is not None:
            return day.isoformat()
        tz = resolve_timezone(timezone, self.daily_resolver.default_timezone)
        return now.astimezone(tz).date().isoformat()

    def daily(
        self,
        sign: str,
        hemisphere: Hemisphere | str,
        user: str = "anon",
        day: date | None = None,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> DailyContentRow | None:
        """
        Retourne la ligne de contenu quotidien, depuis le cache si possible.

        Args:
            sign: Libellé du signe ou de la cuspide.
            hemisphere: Hémisphère (forme longue ou courte).
            user: Identifiant utilisateur pour la clé de cache.
            day: Date explicite (sinon « aujourd'hui » dans le fuseau de l'utilisateur).
            timezone: Fuseau IANA de l'utilisateur.
            now: Instant courant (injectable pour les tests).

        Returns:
            DailyContentRow | None: None si aucun contenu n'est publié.

        Raises:
            StoreUnavailable: si le dépôt est injoignable.
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        hemi = normalize_hemisphere(hemisphere)
        date_str = self._cache_date(day, timezone, now)
        key = daily_cache_key(user, sign, hemi, date_str)
        cached = self.cache.get(key)
        if cached is not None:
            DAILY_CONTENT_LOOKUPS.labels("cached").inc()
            return cached
        try:
            row = self.flight.do(
                (slugify_sign(sign), hemi.code, date_str),
                lambda: self.daily_resolver.resolve(
                    sign, hemi, day=day, timezone=timezone, now=now
                ),
            )
        except StoreUnavailable:
            DAILY_CONTENT_LOOKUPS.labels("store_unavailable").inc()
            raise
        if row is None:
            DAILY_CONTENT_LOOKUPS.labels("not_found").inc()
            return None
        self.cache.set(key, row)
        DAILY_CONTENT_LOOKUPS.labels("matched").inc()
        return row

    def monthly(
        self,
        sign: str,
        hemisphere: Hemisphere | str,
        month: date | None = None,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> MonthlyForecastRow | None:
        return self.monthly_resolver.resolve(
            sign, hemisphere, month=month, timezone=timezone, now=now
        )
