from fastapi import APIRouter, Depends, Response, status

from garage.api.dependencies import get_auth_service, get_csrf_tokens, get_settings
from garage.core.config import Settings
from garage.core.rate_limit import auth_rate_limit
from garage.features.authentication.services import AuthService
from garage.features.authentication.schemas import (
    CsrfOut,
    MessageOut,
    SignInIn,
    SignInOut,
    SignUpIn,
)
from garage.security.csrf import CsrfTokens

router = APIRouter(tags=["auth"])

# -----------------------------
# Sign-up
# -----------------------------
@router.post(
    "/signup",
    summary="Créer un compte client",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageOut,
    dependencies=[Depends(auth_rate_limit)],
    responses={
        400: {"description": "Données invalides"},
        409: {"description": "Email déjà utilisé"},
    },
)
def sign_up(payload: SignUpIn, svc: AuthService = Depends(get_auth_service)):
    svc.sign_up(payload)
    return MessageOut(message="Utilisateur créé avec succès")

# -----------------------------
# Sign-in
# -----------------------------
@router.post(
    "/signin",
    summary="Se connecter",
    description="Pose le jeton de session en cookie httpOnly (SameSite strict, 24h).",
    response_model=SignInOut,
    dependencies=[Depends(auth_rate_limit)],
    responses={401: {"description": "Email ou mot de passe incorrect"}},
)
def sign_in(
    payload: SignInIn,
    response: Response,
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    user, token = svc.sign_in(payload)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        secure=settings.AUTH_COOKIE_SECURE,
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        path=settings.AUTH_COOKIE_PATH,
    )
    return SignInOut(auth=True, role=user.role)

# -----------------------------
# Logout
# -----------------------------
@router.post(
    "/logout",
    summary="Se déconnecter (suppression du cookie de session)",
    status_code=status.HTTP_204_NO_CONTENT,
)
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path=settings.AUTH_COOKIE_PATH,
        httponly=True,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        secure=settings.AUTH_COOKIE_SECURE,
    )
    return None

# -----------------------------
# CSRF
# -----------------------------
@router.get(
    "/csrf",
    summary="Obtenir un jeton anti-CSRF",
    response_model=CsrfOut,
)
def get_csrf(tokens: CsrfTokens = Depends(get_csrf_tokens)):
    return CsrfOut(token=tokens.create())
