"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `astrocusp` en ajoutant la racine du projet
au sys.path, et fournit les fixtures partagées (instant figé, Lune moyenne, dépôt en mémoire).
"""

import os
import random
import sys
from datetime import UTC, datetime
from unittest.mock import Mock, patch

import pytest

# Ensure project root is on sys.path so that
# imports like `from astrocusp...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from astrocusp.infra.astro.mean_synodic import MeanSynodicMoon  # noqa: E402
from astrocusp.infra.content_repo import InMemoryContentRepository  # noqa: E402

# Instant figé à l'intérieur de la plage couverte par les tables planétaires
FIXED_NOW = datetime(2025, 11, 1, tzinfo=UTC)

SCENARIO_DAILY_ROWS = [
    {
        "sign": "ARIES-TAURUS CUSP",
        "hemisphere": "NH",
        "date": "2025-04-20",
        "daily_horoscope": "Steady fire meets patient earth.",
        "affirmation": "I build what I begin.",
    },
]

SCENARIO_MONTHLY_ROWS = [
    {
        "sign": "Aries",
        "hemisphere": "Northern",
        "date": "2025-04-01",
        "monthly_forecast": "A month to start, then to finish.",
    },
]


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def seeded_rng() -> random.Random:
    """Source aléatoire à graine fixe pour des degrés reproductibles."""
    return random.Random(42)


@pytest.fixture
def mean_moon() -> MeanSynodicMoon:
    return MeanSynodicMoon()


@pytest.fixture
def content_store() -> InMemoryContentRepository:
    """Dépôt en mémoire contenant une seule ligne de cuspide publiée le 2025-04-20."""
    return InMemoryContentRepository(daily=SCENARIO_DAILY_ROWS, monthly=SCENARIO_MONTHLY_ROWS)


@pytest.fixture
def mock_redis_client():
    """Mock du client Redis pour éviter les erreurs de connexion dans les tests."""
    with patch("redis.Redis.from_url") as from_url:
        client = Mock()
        client.ping.return_value = True
        client.get.return_value = None
        client.setex.return_value = True
        from_url.return_value = client
        yield client
