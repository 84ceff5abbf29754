"""
➡️ But : Lecture des comptes clients pour le tableau de bord du garagiste.
"""

from typing import Sequence

from garage.db.models.users import Role, User
from garage.db.repositories.users import UserRepository

class ClientService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def count(self) -> int:
        return self.repo.count_by_role(Role.client)

    def list(self) -> Sequence[User]:
        return self.repo.list_by_role(Role.client)
