"""
➡️ But : Persistance des véhicules.

Les écritures sont des instructions uniques (INSERT / UPDATE ... WHERE id /
DELETE ... WHERE id) : l'existence de la cible se lit dans le nombre de lignes
affectées, pas dans une lecture préalable.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, update
from sqlmodel import select

from garage.db.repositories.base import BaseRepository
from garage.db.models.users import User
from garage.db.models.vehicles import Vehicle


class VehicleRepository(BaseRepository[Vehicle]):
    model = Vehicle

    # ---------- READ ----------

    def list_with_owner(self) -> List[Dict[str, Any]]:
        """Tous les véhicules, avec prénom/nom du client associé (LEFT JOIN)."""
        statement = (
            select(Vehicle, User.firstname, User.lastname)
            .join(User, Vehicle.client_id == User.id, isouter=True)
            .order_by(Vehicle.id)
        )
        return [
            {**vehicle.model_dump(), "firstname": firstname, "lastname": lastname}
            for vehicle, firstname, lastname in self.session.exec(statement).all()
        ]

    def get_with_owner(self, vehicle_id: int) -> Optional[Dict[str, Any]]:
        statement = (
            select(Vehicle, User.firstname, User.lastname, User.email)
            .join(User, Vehicle.client_id == User.id, isouter=True)
            .where(Vehicle.id == vehicle_id)
        )
        row = self.session.exec(statement).first()
        if row is None:
            return None
        vehicle, firstname, lastname, email = row
        return {**vehicle.model_dump(), "firstname": firstname, "lastname": lastname, "email": email}

    def plate_taken(self, name: str, *, exclude_id: Optional[int] = None) -> bool:
        statement = select(Vehicle.id).where(Vehicle.name == name)
        if exclude_id is not None:
            statement = statement.where(Vehicle.id != exclude_id)
        return self.session.exec(statement).first() is not None

    # ---------- WRITE ----------

    def insert(self, **fields) -> int:
        return self.create(**fields).id

    def update_by_id(self, vehicle_id: int, **fields) -> int:
        """UPDATE unique ; retourne le nombre de lignes affectées (0 = id inconnu)."""
        statement = update(Vehicle).where(Vehicle.id == vehicle_id).values(**fields)
        return self.execute_write(statement)

    def delete_by_id(self, vehicle_id: int) -> int:
        statement = delete(Vehicle).where(Vehicle.id == vehicle_id)
        return self.execute_write(statement)
