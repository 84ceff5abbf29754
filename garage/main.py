"""
➡️ But : assembler toutes les pièces du puzzle.

create_app() crée l'instance FastAPI et configure :

CORS (le front React, cookies autorisés)

en-têtes de sécurité, limitation de débit, handlers d'erreurs

titre, version, tags, schéma OpenAPI personnalisé

Inclut les routers sous /api et prépare la base au démarrage (connexion avec
reconnexion à délai fixe, création des tables).

Point unique d'exécution : uvicorn garage.main:app --reload.
"""

from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from garage.core.config import Settings, settings
from garage.core.errors import register_exception_handlers
from garage.core.logging_config import setup_logging
from garage.core.openapi import custom_openapi
from garage.core.rate_limit import global_rate_limit
from garage.core.security_headers import install_security_headers
from garage.db.session import Database

from garage.api.routers import authentication, clients, vehicles


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.APP_NAME,
        version="1.0.0",
        openapi_tags=[
            {"name": "auth", "description": "Inscription, connexion, jeton anti-CSRF"},
            {"name": "clients", "description": "Comptes clients (garagiste uniquement)"},
            {"name": "vehicules", "description": "Gestion des véhicules et export RGPD"},
        ],
    )

    # Ressources partagées, injectées par les dépendances (pas d'état global)
    app.state.settings = app_settings
    app.state.database = Database.from_settings(app_settings)
    app.state.rate_limiters = {}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.CLIENT_URL],
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["*"],
    )
    install_security_headers(app, production=app_settings.ENV == "prod")
    register_exception_handlers(app)

    # Routers
    api = APIRouter(prefix="/api", dependencies=[Depends(global_rate_limit)])
    api.include_router(authentication.router)
    api.include_router(clients.router)
    api.include_router(vehicles.router)
    app.include_router(api)

    app.openapi = lambda: custom_openapi(app)

    # Démarrage / arrêt
    @app.on_event("startup")
    def on_startup():
        setup_logging(app_settings.LOG_LEVEL)
        database: Database = app.state.database
        database.connect()
        database.init_schema()

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.database.dispose()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("garage.main:app", host="127.0.0.1", port=3000, reload=(settings.ENV == "dev"))
