"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, dépôt de contenus, fournisseur lunaire, cache,
services) et expose un singleton `container` utilisé par le reste de l'application.
"""

import os
import random

import structlog

from astrocusp.core.settings import Settings, get_settings
from astrocusp.domain.daily_resolver import (
    DailyContentResolver,
    MonthlyForecastResolver,
    resolve_timezone,
)
from astrocusp.domain.services import IdentityService
from astrocusp.domain.singleflight import KeyedSingleFlight
from astrocusp.infra.astro.mean_synodic import MeanSynodicMoon
from astrocusp.infra.astro.swisseph_moon import SwissEphemerisMoon
from astrocusp.infra.content_repo import JSONContentRepository
from astrocusp.infra.repositories import InMemoryDailyCache, RedisDailyCache
from astrocusp.services.content import ContentService
from astrocusp.services.sky import SkyService

log = structlog.get_logger(__name__)


def build_moon(backend: str):
    """Fournisseur lunaire selon `MOON_BACKEND` (`swisseph` ou `mean`)."""
    if backend == "mean":
        return MeanSynodicMoon()
    if backend == "swisseph":
        return SwissEphemerisMoon()
    raise ValueError(f"unknown MOON_BACKEND: {backend!r}")


class Container:
    def __init__(self, settings: Settings | None = None, content_repo=None, moon=None):
        self.settings = settings or get_settings()
        if content_repo is None:
            base_dir = os.path.dirname(__file__)
            infra_dir = os.path.normpath(os.path.join(base_dir, "..", "infra"))
            path = self.settings.CONTENT_PATH or os.path.join(infra_dir, "content.json")
            content_repo = JSONContentRepository(path=path)
        self.content_repo = content_repo
        self.moon = moon or build_moon(self.settings.MOON_BACKEND)

        ttl = self.settings.CACHE_TTL_SECONDS
        if self.settings.REDIS_URL:
            try:
                self.daily_cache = RedisDailyCache(self.settings.REDIS_URL, ttl_seconds=ttl)
                self.storage_backend = "redis"
            except Exception as err:
                if self.settings.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                log.warning("redis_unavailable_fallback_memory", error=str(err))
                self.daily_cache = InMemoryDailyCache(ttl_seconds=ttl)
                self.storage_backend = "memory-fallback"
        else:
            if self.settings.REQUIRE_REDIS:
                raise RuntimeError("Redis required but REDIS_URL not set")
            self.daily_cache = InMemoryDailyCache(ttl_seconds=ttl)
            self.storage_backend = "memory"

        self.identity = IdentityService(rng=random.Random(self.settings.CUSP_SEED))
        self.content = ContentService(
            daily=DailyContentResolver(
                self.content_repo,
                default_timezone=self.settings.DEFAULT_TIMEZONE,
                allow_true_sign_fallback=self.settings.ALLOW_TRUE_SIGN_FALLBACK,
            ),
            monthly=MonthlyForecastResolver(
                self.content_repo, default_timezone=self.settings.DEFAULT_TIMEZONE
            ),
            cache=self.daily_cache,
            flight=KeyedSingleFlight(),
        )
        self.sky = SkyService(
            moon=self.moon,
            tz=resolve_timezone(self.settings.SKY_TIMEZONE, self.settings.DEFAULT_TIMEZONE),
            window_days=self.settings.EVENT_WINDOW_DAYS,
            tolerance_days=self.settings.PLANET_MODEL_TOLERANCE_DAYS,
        )


container = Container()
