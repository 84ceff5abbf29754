"""
➡️ But : Socle commun des repositories (User, Vehicle).

Aucune logique métier ici. Toute écriture passe par `_transaction()` : si
l'écriture échoue (contrainte unique, connexion perdue...), la transaction
est annulée et l'exception remonte telle quelle au service, qui décide de sa
traduction (Conflict, 503...).
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, Sequence, Type, TypeVar

from sqlalchemy.sql import Executable
from sqlmodel import SQLModel, Session, select, func

ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    """Les repositories concrets définissent `model = MaTableSQLModel`."""

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # ---------- READ ----------

    def get(self, id_: Any) -> Optional[ModelT]:
        return self.session.get(self.model, id_)

    def all(self) -> Sequence[ModelT]:
        return self.session.exec(select(self.model).order_by(self.model.id)).all()

    def count(self) -> int:
        return self.session.exec(select(func.count(self.model.id))).one()

    # ---------- WRITE ----------

    def create(self, **fields) -> ModelT:
        entity = self.model(**fields)
        with self._transaction():
            self.session.add(entity)
        self.session.refresh(entity)
        return entity

    def execute_write(self, statement: Executable) -> int:
        """
        Exécute une instruction d'écriture unique (UPDATE / DELETE ... WHERE id).
        Retourne le nombre de lignes affectées : 0 signifie que la cible n'existe pas.
        """
        with self._transaction():
            result = self.session.execute(statement)
        return result.rowcount
