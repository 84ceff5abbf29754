"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_vehicle_service() : crée un VehicleService à partir d'une session DB.

RoleGuard({Role.admin}) : chaque route déclare l'ensemble des rôles requis
comme une donnée ; la garde lit le cookie de session et délègue à
AuthService.authorize(). Rien n'est stocké sur l'objet requête.

csrf_guard : vérifie le jeton anti-CSRF présent dans le corps JSON.
"""

import json
import re
from typing import AbstractSet, Optional

from fastapi import Depends, Request
from sqlmodel import Session

from garage.core.config import Settings, jwt_settings_from
from garage.core.errors import BadRequest, InvalidCsrf
from garage.db.models.users import Role
from garage.db.session import get_session

from garage.db.repositories.users import UserRepository
from garage.db.repositories.vehicles import VehicleRepository

from garage.features.authentication.services import AuthService, DEFAULT_ROLES, Principal
from garage.features.users.services import ClientService
from garage.features.vehicles.services import VehicleService

from garage.security.csrf import CsrfTokens


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# -----------------------------
# Repositories
# -----------------------------
def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_vehicle_repository(session: Session = Depends(get_session)) -> VehicleRepository:
    return VehicleRepository(session)


# -----------------------------
# Services
# -----------------------------
def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        user_repo=user_repo,
        jwt_settings=jwt_settings_from(settings),
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )

def get_client_service(user_repo: UserRepository = Depends(get_user_repository)) -> ClientService:
    return ClientService(user_repo)

def get_vehicle_service(
    vehicle_repo: VehicleRepository = Depends(get_vehicle_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> VehicleService:
    return VehicleService(repo=vehicle_repo, user_repo=user_repo)

def get_csrf_tokens(settings: Settings = Depends(get_settings)) -> CsrfTokens:
    return CsrfTokens(settings.CSRF_SECRET)


# -----------------------------
# Paramètres de chemin
# -----------------------------
def get_vehicle_id(vehicle_id: str) -> int:
    if not re.fullmatch(r"[0-9]{1,18}", vehicle_id):
        raise BadRequest("ID véhicule invalide")
    return int(vehicle_id)


# -----------------------------
# Authentication / roles
# -----------------------------
class RoleGuard:
    """
    Dépendance paramétrée par l'ensemble des rôles requis (défaut : admin + client).
    Retourne le Principal vérifié, que la route reçoit explicitement.
    """

    def __init__(self, required_roles: AbstractSet[Role] = DEFAULT_ROLES):
        self.required_roles = frozenset(required_roles)

    def __call__(
        self,
        request: Request,
        settings: Settings = Depends(get_settings),
        svc: AuthService = Depends(get_auth_service),
    ) -> Principal:
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)
        return svc.authorize(token, self.required_roles)


require_admin = RoleGuard({Role.admin})


# -----------------------------
# CSRF
# -----------------------------
async def csrf_guard(
    request: Request,
    settings: Settings = Depends(get_settings),
    tokens: CsrfTokens = Depends(get_csrf_tokens),
) -> None:
    """Échoue fermé : jeton absent, corps illisible ou jeton faux -> InvalidCsrf."""
    if not settings.CSRF_PROTECTION:
        return
    token: Optional[str] = None
    raw = await request.body()
    if raw:
        try:
            data = json.loads(raw)
        except ValueError:
            data = None
        if isinstance(data, dict):
            token = data.get("token")
    if not tokens.verify(token):
        raise InvalidCsrf()
