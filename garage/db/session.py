"""
➡️ But : Configurer la base et gérer son cycle de vie.

build_engine() : moteur SQLAlchemy (SQLite en dev/test, MySQL ou Postgres en prod).

Database : objet injecté dans l'application (app.state.database) plutôt qu'un
handle global. Il porte la politique de reconnexion : délai fixe entre deux
tentatives, pas de backoff.

get_session() : dépendance FastAPI qui ouvre une session par requête, puis la
ferme proprement.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError
from sqlmodel import Session, SQLModel, create_engine

# Import all models for creating all tables
from garage.db.models.users import User  # noqa: F401
from garage.db.models.vehicles import Vehicle  # noqa: F401

from garage.core.config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    url = settings.DATABASE_URL
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite")

    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False

    return create_engine(
        url,
        echo=False,
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,  # ping utile pour MySQL/Postgres ; inutile pour SQLite
    )


class Database:
    """Pool de connexions + politique de reconnexion."""

    def __init__(
        self,
        engine: Engine,
        *,
        reconnect_delay: float = 2.0,
        max_attempts: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.reconnect_delay = reconnect_delay
        self.max_attempts = max_attempts
        self._sleep = sleep
        self.connected = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            build_engine(settings),
            reconnect_delay=settings.DB_RECONNECT_DELAY_SECONDS,
            max_attempts=settings.DB_CONNECT_MAX_ATTEMPTS,
        )

    # ---------- Connexion ----------

    def connect(self) -> None:
        """
        Vérifie la connexion (SELECT 1) ; en cas d'échec, réessaie après un délai fixe.
        max_attempts=0 : réessaie indéfiniment.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                with self.engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
            except (OperationalError, DisconnectionError) as exc:
                self.connected = False
                if self.max_attempts and attempt >= self.max_attempts:
                    logger.error("Database unreachable after %s attempts", attempt)
                    raise
                logger.warning(
                    "Database connection failed (attempt %s), retrying in %.1fs: %s",
                    attempt, self.reconnect_delay, exc,
                )
                self._sleep(self.reconnect_delay)
                continue
            self.connected = True
            logger.info("Connected to database %s", self.engine.url.render_as_string(hide_password=True))
            return

    @staticmethod
    def is_connection_lost(exc: BaseException) -> bool:
        if isinstance(exc, DisconnectionError):
            return True
        return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)

    def mark_connection_lost(self, exc: BaseException) -> None:
        """Connexion perdue : erreur transitoire, on vide le pool pour reconnecter au prochain checkout."""
        logger.warning("Database connection lost, pool will reconnect: %s", exc)
        self.connected = False
        self.engine.dispose()

    # ---------- Schéma / sessions ----------

    def init_schema(self) -> None:
        """
        Crée les tables si elles n'existent pas.
        En prod avec des migrations, préfère ces dernières.
        """
        SQLModel.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session

    def dispose(self) -> None:
        self.engine.dispose()
        self.connected = False


def get_session(request: Request):
    """
    Dépendance FastAPI : fournit une session par requête.
    Utilisation :
        def route(..., session: Session = Depends(get_session)):
            ...
    """
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
