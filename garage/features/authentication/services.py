from dataclasses import dataclass
from typing import AbstractSet, Optional

from jose import JWTError
from sqlalchemy.exc import IntegrityError

from garage.core.errors import (
    Conflict,
    Forbidden,
    InvalidCredential,
    SubjectNotFound,
    Unauthenticated,
    Unauthorized,
)
from garage.db.models.users import Role, User
from garage.db.repositories.users import UserRepository
from garage.security.password import hash_password, verify_password
from garage.security.tokens import JWTSettings, create_session_token, decode_session_token
from garage.features.authentication.schemas import SignUpIn, SignInIn

DEFAULT_ROLES: frozenset = frozenset({Role.admin, Role.client})


@dataclass(frozen=True)
class Principal:
    """Sujet authentifié, transmis explicitement aux handlers."""
    user_id: int
    role: Role


class AuthService:
    """
    Service d'authentification : orchestre le repository des utilisateurs + les jetons.
    Ne contient pas d'accès SQL direct et lève des HTTPException nommées.
    """

    def __init__(
        self,
        *,
        user_repo: UserRepository,
        jwt_settings: JWTSettings,
        bcrypt_rounds: int = 12,
    ):
        self.user_repo = user_repo
        self.jwt = jwt_settings
        self.bcrypt_rounds = bcrypt_rounds

    # ---------- Sign up ----------
    def sign_up(self, payload: SignUpIn) -> User:
        duplicate = Conflict("Un utilisateur avec cet email existe déjà")
        if self.user_repo.email_exists(payload.email):
            raise duplicate
        try:
            return self.user_repo.create(
                firstname=payload.firstname,
                lastname=payload.lastname,
                email=payload.email,
                password=hash_password(payload.password, self.bcrypt_rounds),
                role=Role.client,
            )
        except IntegrityError:
            # inscription concurrente : la contrainte unique de la base tranche
            if self.user_repo.email_exists(payload.email):
                raise duplicate
            raise

    # ---------- Sign in ----------
    def sign_in(self, payload: SignInIn) -> tuple[User, str]:
        user = self.user_repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.password):
            # Ne pas révéler si l'utilisateur existe
            raise Unauthorized()
        token = create_session_token(user_id=user.id, role=user.role.value, settings=self.jwt)
        return user, token

    # ---------- Autorisation ----------
    def authorize(self, token: Optional[str], required_roles: AbstractSet[Role] = DEFAULT_ROLES) -> Principal:
        """
        Chaîne complète, dans cet ordre :
        1. pas de jeton            -> Unauthenticated
        2. signature / expiration  -> InvalidCredential (avant tout accès base)
        3. rôle relu en base       -> SubjectNotFound si l'utilisateur n'existe plus
        4. rôle hors de l'ensemble -> Forbidden
        """
        if not token:
            raise Unauthenticated()

        try:
            decoded = decode_session_token(token, self.jwt)
            user_id = int(decoded["sub"])
        except (JWTError, KeyError, ValueError):
            raise InvalidCredential()

        role = self.user_repo.get_role(user_id)
        if role is None:
            raise SubjectNotFound()

        if role not in required_roles:
            raise Forbidden()

        return Principal(user_id=user_id, role=role)
