import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TypedDict

from jose import jwt, JWTError

# ==========================================================
# 🔧 Configuration : paramètres de génération/validation JWT
# ==========================================================

@dataclass(frozen=True)
class JWTSettings:
    """
    Configuration du jeton de session.

    - `secret` : clé secrète pour signer/valider les tokens
    - `issuer` / `audience` : vérifiés au décodage
    - `algorithm` : algo de signature (HS256 recommandé)
    - `session_ttl` : durée de vie de la session (24h par défaut)
    """
    secret: str
    issuer: str = "garage-app"
    audience: str = "garage-users"
    algorithm: str = "HS256"
    session_ttl: timedelta = timedelta(hours=24)


# ==========================================================
# 🧱 Types
# ==========================================================

class DecodedToken(TypedDict, total=False):
    iss: str
    aud: str
    sub: str            # identifiant utilisateur
    role: str           # "admin" | "client" (indicatif, relu en base)
    typ: str            # "session"
    jti: str
    iat: int
    exp: int


# ==========================================================
# 🧩 Fonctions utilitaires
# ==========================================================

def _now() -> datetime:
    """Renvoie l'heure UTC actuelle."""
    return datetime.now(timezone.utc)

def new_jti() -> str:
    """Crée un identifiant unique pour un token."""
    return str(uuid.uuid4())


# ==========================================================
# 🎟️ Génération
# ==========================================================

def create_session_token(*, user_id: int, role: str, settings: JWTSettings) -> str:
    """
    Crée le jeton de session posé en cookie httpOnly.
    Rien n'est stocké côté serveur : la session est sans état.
    """
    now = _now()
    payload: DecodedToken = {
        "iss": settings.issuer,
        "aud": settings.audience,
        "sub": str(user_id),
        "role": role,
        "typ": "session",
        "jti": new_jti(),
        "iat": int(now.timestamp()),
        "exp": int((now + settings.session_ttl).timestamp()),
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


# ==========================================================
# 🔍 Décodage / Validation
# ==========================================================

def decode_session_token(token: str, settings: JWTSettings) -> DecodedToken:
    """
    Décode et valide un jeton de session (signature, expiration, émetteur, audience).
    Lève JWTError si le jeton est invalide, expiré ou d'un autre type.
    """
    decoded = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        audience=settings.audience,
        issuer=settings.issuer,
    )
    if decoded.get("typ") != "session":
        raise JWTError("Invalid token type")
    return decoded  # type: ignore[return-value]
