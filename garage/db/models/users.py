"""
➡️ But : Table des utilisateurs (garagiste et clients).

Le mot de passe est toujours stocké haché (bcrypt). Le rôle est relu à chaque
requête protégée : un changement de rôle prend effet sans attendre
l'expiration de la session.
"""

from enum import Enum

from sqlmodel import Field

from .base import BaseModelDB


class Role(str, Enum):
    admin = "admin"
    client = "client"


class User(BaseModelDB, table=True):
    __tablename__ = "users"

    firstname: str = Field(max_length=50)
    lastname: str = Field(max_length=50)
    email: str = Field(index=True, unique=True, max_length=255)
    password: str
    role: Role = Field(default=Role.client)
