"""
➡️ But : Taxonomie d'erreurs de l'API et traduction en réponses JSON.

Les services lèvent des HTTPException nommées (Conflict, NotFound...) ; les
handlers enregistrés ici les transforment en `{"error": ...}` ou, pour la
validation, en `{"errors": [...]}` (une entrée par champ en échec).

Les erreurs de stockage sont journalisées avec leur détail côté serveur et
renvoyées au client sous un message générique.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ==========================================================
# 🧱 Taxonomie
# ==========================================================

class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Erreur serveur"

    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.message,
            headers=headers,
        )


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Données invalides"

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__(detail=errors)
        self.errors = errors

    @classmethod
    def for_field(cls, path: str, msg: str, *, value: Any = None, location: str = "body") -> "ValidationFailed":
        return cls([field_error(path, msg, value=value, location=location)])


class BadRequest(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Requête invalide"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Accès refusé : aucun jeton fourni"


class InvalidCredential(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Jeton invalide"


class Unauthorized(AppError):
    # message générique : ne jamais dire lequel de l'email ou du mot de passe est faux
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Email ou mot de passe incorrect"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Accès refusé : rôle insuffisant"


class InvalidCsrf(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Jeton CSRF invalide"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Ressource introuvable"


class SubjectNotFound(NotFound):
    message = "Utilisateur introuvable"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflit"


class TooManyRequests(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Trop de requêtes, veuillez réessayer plus tard."


class ServerError(AppError):
    pass


class ServiceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service temporairement indisponible"


# ==========================================================
# 🧩 Entrées de validation
# ==========================================================

def field_error(path: str, msg: str, *, value: Any = None, location: str = "body") -> Dict[str, Any]:
    return {"type": "field", "path": path, "msg": msg, "location": location, "value": value}


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def errors_from_pydantic(raw: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Convertit les erreurs pydantic en entrées {type, path, msg, location, value}.
    Une seule entrée par champ : la première erreur rencontrée l'emporte.
    """
    out: List[Dict[str, Any]] = []
    seen = set()
    for err in raw:
        loc = list(err.get("loc") or ())
        location = str(loc.pop(0)) if loc else "body"
        path = ".".join(str(part) for part in loc)
        if (location, path) in seen:
            continue
        seen.add((location, path))
        msg = err.get("msg", "Valeur invalide")
        # "Value error, ..." ajouté par pydantic devant les ValueError des validateurs
        if isinstance(msg, str) and msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        out.append(field_error(path, msg, value=_jsonable(err.get("input")), location=location))
    return out


# ==========================================================
# 🚦 Handlers
# ==========================================================

def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, ValidationFailed):
        body: Dict[str, Any] = {"errors": exc.errors}
    else:
        body = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors_from_pydantic(exc.errors())},
    )


def _storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    database = getattr(request.app.state, "database", None)
    if database is not None and database.is_connection_lost(exc):
        database.mark_connection_lost(exc)
        err: AppError = ServiceUnavailable()
    else:
        logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        err = ServerError()
    return JSONResponse(status_code=err.status_code, content={"error": err.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_exception_handler)
