"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares,
routes, métriques et gestion des erreurs du moteur de résolution signe/date.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, métriques, timing)
- Enregistrer les enveloppes d'erreur
- Monter les routers (santé, identité, ciel, contenu, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from astrocusp.api.errors import register_error_handlers
from astrocusp.api.routes_content import router as content_router
from astrocusp.api.routes_health import router as health_router
from astrocusp.api.routes_identity import router as identity_router
from astrocusp.api.routes_sky import router as sky_router
from astrocusp.app.metrics import PrometheusMiddleware, metrics_router
from astrocusp.core.container import container
from astrocusp.core.logging import setup_logging
from astrocusp.middlewares.request_id import RequestIDMiddleware
from astrocusp.middlewares.timing import TimingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes
    """
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    # ajouté en dernier: s'exécute en premier et lie le request_id avant les autres logs
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(identity_router)
    app.include_router(sky_router)
    app.include_router(content_router)
    app.include_router(metrics_router)
    return app


app = create_app()
