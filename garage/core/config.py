"""
➡️ But : Centraliser tous les paramètres configurables (nom d'app, base, secrets, cookies, limites).

Utilise pydantic-settings pour charger automatiquement les variables d'environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from garage.core.config import settings
print(settings.APP_NAME)

create_app() accepte aussi une instance explicite (tests, scripts).
"""

from datetime import timedelta
from typing import Optional

from pydantic_settings import BaseSettings
from garage.security.tokens import JWTSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Garage-API"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"
    CLIENT_URL: str = "http://localhost:5173"  # origine autorisée (CORS)

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "garage.db"
    # Pour MySQL/Postgres, définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None
    DB_RECONNECT_DELAY_SECONDS: float = 2.0  # délai fixe, pas de backoff
    DB_CONNECT_MAX_ATTEMPTS: int = 0         # 0 = réessayer indéfiniment

    # -----------------------------
    # JWT / Session
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ISSUER: str = "garage-app"
    JWT_AUDIENCE: str = "garage-users"
    JWT_ALGORITHM: str = "HS256"
    SESSION_TTL_HOURS: int = 24

    # Cookie de session
    AUTH_COOKIE_NAME: str = "token"
    AUTH_COOKIE_SAMESITE: str = "strict"  # "lax" | "strict" | "none"
    AUTH_COOKIE_PATH: str = "/"
    AUTH_COOKIE_SECURE: Optional[bool] = None   # auto selon ENV si None
    AUTH_COOKIE_MAX_AGE: Optional[int] = None   # auto depuis SESSION_TTL si None

    # -----------------------------
    # CSRF
    # -----------------------------
    CSRF_SECRET: str = "CHANGE_ME_CSRF"   # ⚠️ change en prod
    CSRF_PROTECTION: bool = False

    # -----------------------------
    # Mots de passe
    # -----------------------------
    BCRYPT_ROUNDS: int = 12

    # -----------------------------
    # Rate limiting
    # -----------------------------
    RATE_LIMIT_ENABLED: Optional[bool] = None  # auto: actif en prod si None
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_MAX_REQUESTS: int = 100
    AUTH_RATE_LIMIT_MAX_REQUESTS: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context):
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

        # Cookie secure partout sauf en développement local
        if self.AUTH_COOKIE_SECURE is None:
            object.__setattr__(self, "AUTH_COOKIE_SECURE", self.ENV == "prod")

        if self.AUTH_COOKIE_MAX_AGE is None:
            object.__setattr__(self, "AUTH_COOKIE_MAX_AGE", self.SESSION_TTL_HOURS * 60 * 60)

        if self.RATE_LIMIT_ENABLED is None:
            object.__setattr__(self, "RATE_LIMIT_ENABLED", self.ENV == "prod")

        # bcrypt n'accepte qu'un coût entre 4 et 31
        object.__setattr__(self, "BCRYPT_ROUNDS", min(max(self.BCRYPT_ROUNDS, 4), 31))


def jwt_settings_from(s: Settings) -> JWTSettings:
    return JWTSettings(
        secret=s.JWT_SECRET_KEY,
        issuer=s.JWT_ISSUER,
        audience=s.JWT_AUDIENCE,
        algorithm=s.JWT_ALGORITHM,
        session_ttl=timedelta(hours=s.SESSION_TTL_HOURS),
    )


# Instance globale importable partout
settings = Settings()
