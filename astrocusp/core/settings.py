"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "astrocusp"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    # Degré solaire cosmétique: graine optionnelle pour des sorties reproductibles
    CUSP_SEED: int | None = None

    # Fuseaux: ancrage des dates de contenu et affichage du ciel courant
    DEFAULT_TIMEZONE: str = "UTC"
    SKY_TIMEZONE: str = "Australia/Sydney"

    # Dépôt de contenus (fichier JSON) et cache Redis optionnel
    CONTENT_PATH: str | None = None
    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False
    CACHE_TTL_SECONDS: int = 6 * 3600

    # Lune: "swisseph" (Moshier, sans fichiers) | "mean" (cycle synodique moyen)
    MOON_BACKEND: str = "swisseph"

    # Fenêtre d'évènements et tolérance du modèle planétaire
    EVENT_WINDOW_DAYS: int = 45
    PLANET_MODEL_TOLERANCE_DAYS: int = 90

    # Repli sur un signe pur pour une demande de cuspide (désactivé par défaut)
    ALLOW_TRUE_SIGN_FALLBACK: bool = False


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
