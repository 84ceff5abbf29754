"""
➡️ But : Table des véhicules.

La plaque (`name`) porte une contrainte d'unicité au niveau de la base : c'est
elle qui garantit l'unicité quand deux écritures concurrentes passent toutes
les deux la vérification applicative.

`client_id` est une simple association vers un utilisateur (pas de cascade).
"""

from typing import Optional

from sqlmodel import Field

from .base import BaseModelDB


class Vehicle(BaseModelDB, table=True):
    __tablename__ = "vehicules"

    marque: str = Field(max_length=50)
    modele: str = Field(max_length=50)
    annee: int
    name: str = Field(index=True, unique=True, max_length=255)
    type: Optional[str] = Field(default=None, max_length=50)
    client_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
