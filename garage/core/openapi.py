"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) complète le schéma généré par FastAPI avec une description
des conventions de l'API (cookie de session, format des erreurs).
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API de gestion du garage (clients, véhicules, RGPD).\n\n"
            "### Conventions\n"
            "- Session : cookie httpOnly `token` posé par `/api/signin` (24h).\n"
            "- Erreurs : `{\"error\": ...}`, ou `{\"errors\": [...]}` pour la validation "
            "(une entrée par champ, avec `path`).\n"
            "- Les routes de modification acceptent un champ `token` (anti-CSRF) dans le corps.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
