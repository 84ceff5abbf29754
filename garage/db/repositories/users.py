"""
➡️ But : Encapsuler toutes les opérations de base de données sur la table User.

Ne contient aucune logique métier, juste de la persistance.
"""

from __future__ import annotations

from typing import Optional, Sequence
from sqlmodel import select, func

from garage.db.repositories.base import BaseRepository
from garage.db.models.users import Role, User

class UserRepository(BaseRepository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.exec(
            select(self.model).where(self.model.email == email)
        ).first()

    def email_exists(self, email: str) -> bool:
        return self.session.exec(
            select(self.model.id).where(self.model.email == email)
        ).first() is not None

    def get_role(self, user_id: int) -> Optional[Role]:
        """Relit le rôle courant (jamais celui du jeton)."""
        return self.session.exec(
            select(self.model.role).where(self.model.id == user_id)
        ).first()

    def list_by_role(self, role: Role) -> Sequence[User]:
        return self.session.exec(
            select(self.model).where(self.model.role == role).order_by(self.model.id)
        ).all()

    def count_by_role(self, role: Role) -> int:
        return self.session.exec(
            select(func.count(self.model.id)).where(self.model.role == role)
        ).one()
