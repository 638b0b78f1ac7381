"""
Caches du contenu quotidien résolu.

Seules les résolutions réussies sont mises en cache, sous une clé versionnée
`v2:daily:{user}:{sign}:{hémisphère}:{date}` (changer le préfixe invalide tout l'existant).
Deux implémentations: en mémoire (dev/tests) et Redis (TTL natif via `SETEX`).
"""

import json
import time

import redis
import structlog

from astrocusp.domain.entities import DailyContentRow
from astrocusp.domain.sign_labels import normalize_hemisphere, slugify_sign
from astrocusp.domain.zodiac import Hemisphere

log = structlog.get_logger(__name__)

CACHE_VERSION = "v2"


def daily_cache_key(user: str, sign: str, hemisphere: Hemisphere | str, date_str: str) -> str:
    """Compose la clé de cache, par ex. `v2:daily:anon:aries-taurus-cusp:NH:2025-04-20`."""
    hemi = normalize_hemisphere(hemisphere)
    return f"{CACHE_VERSION}:daily:{user or 'anon'}:{slugify_sign(sign)}:{hemi.code}:{date_str}"


class InMemoryDailyCache:
    """
    Cache en mémoire (utilisé pour dev/tests).

    Les entrées expirent paresseusement à la lecture.
    """

    def __init__(self, ttl_seconds: int = 3600):
        """Initialise un cache vide avec la durée de vie donnée."""
        self.ttl_seconds = ttl_seconds
        self._db: dict[str, tuple[float, dict]] = {}

    def get(self, key: str) -> DailyContentRow | None:
        """Retourne la ligne en cache, ou None si absente ou expirée."""
        entry = self._db.get(key)
        if entry is None:
            return None
        expires_at, payload = entry
        if expires_at <= time.monotonic():
            self._db.pop(key, None)
            return None
        return DailyContentRow.model_validate(payload)

    def set(self, key: str, row: DailyContentRow) -> None:
        self._db[key] = (time.monotonic() + self.ttl_seconds, row.model_dump())


class RedisDailyCache:
    """Cache adossé à Redis (clé: `v2:daily:...`, valeur JSON).

    La connexion est vérifiée à la construction (`ping`); ensuite, une panne Redis n'interrompt
    jamais une requête: la lecture rend None et l'écriture est ignorée (fail-open).
    """

    def __init__(self, url: str, ttl_seconds: int = 3600):
        """Crée un client Redis à partir de l'URL fournie et teste la connexion.

        Raises:
            redis.RedisError: si le serveur est injoignable.
        """
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.client.ping()
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> DailyContentRow | None:
        """Charge et désérialise la ligne `key`, si présente."""
        try:
            raw = self.client.get(key)
        except redis.RedisError as err:
            log.warning("daily_cache_unavailable", op="get", key=key, error=str(err))
            return None
        return DailyContentRow.model_validate(json.loads(raw)) if raw else None

    def set(self, key: str, row: DailyContentRow) -> None:
        """Sérialise en JSON et stocke avec expiration."""
        try:
            self.client.setex(key, self.ttl_seconds, json.dumps(row.model_dump()))
        except redis.RedisError as err:
            log.warning("daily_cache_unavailable", op="set", key=key, error=str(err))
