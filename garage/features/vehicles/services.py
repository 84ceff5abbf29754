"""
➡️ But : Logique métier des véhicules.

Chaque écriture suit le même ordre : validation -> vérification
(unicité / existence) -> une seule écriture. Pas de verrou optimiste :
le dernier qui écrit gagne.

La vérification d'unicité de la plaque n'est qu'une pré-vérification : la
garantie réelle est la contrainte unique de la base, dont la violation est
traduite en le même Conflict.

Les accès en lecture à la liste et les suppressions produisent une ligne
d'audit RGPD (obligation de traçabilité, pas de la télémétrie).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from garage.core.errors import Conflict, NotFound, ValidationFailed
from garage.core.logging_config import get_audit_logger
from garage.db.repositories.users import UserRepository
from garage.db.repositories.vehicles import VehicleRepository
from garage.features.vehicles.schemas import (
    AssociatedClientOut,
    GdprDisclosureOut,
    VehicleCreatedOut,
    VehicleDeletedOut,
    VehicleIn,
    VehicleOut,
)

logger = logging.getLogger(__name__)

PLATE_CONFLICT = "Cette plaque d'immatriculation existe déjà"
VEHICLE_NOT_FOUND = "Véhicule non trouvé"


class VehicleService:
    def __init__(
        self,
        *,
        repo: VehicleRepository,
        user_repo: UserRepository,
        now_fn: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.repo = repo
        self.user_repo = user_repo
        self.now_fn = now_fn
        self.audit = get_audit_logger()

    # -------- Helpers --------

    def _check_client(self, client_id: Optional[int]) -> None:
        """Intégrité référentielle côté application : le client associé doit exister."""
        if client_id is not None and self.user_repo.get(client_id) is None:
            raise ValidationFailed.for_field("client_id", "Client introuvable", value=client_id)

    @staticmethod
    def _fields(payload: VehicleIn) -> Dict[str, Any]:
        return {
            "marque": payload.marque,
            "modele": payload.modele,
            "annee": payload.annee,
            "name": payload.name,
            "type": payload.type,
            "client_id": payload.client_id,
        }

    def _conflict_from(self, exc: IntegrityError, name: str, *, exclude_id: Optional[int] = None) -> Exception:
        # on ne traduit en Conflict que si c'est bien la plaque qui est prise
        if self.repo.plate_taken(name, exclude_id=exclude_id):
            logger.info("Plate %s rejected by storage unique constraint", name)
            return Conflict(PLATE_CONFLICT)
        return exc

    # -------- Reads --------

    def list(self, *, actor_id: int) -> List[VehicleOut]:
        self.audit.info(
            "RGPD Audit: Accès aux données véhicules par l'utilisateur %s à %s",
            actor_id, self.now_fn().isoformat(),
        )
        return [VehicleOut(**row) for row in self.repo.list_with_owner()]

    def gdpr_disclosure(self, vehicle_id: int) -> GdprDisclosureOut:
        row = self.repo.get_with_owner(vehicle_id)
        if row is None:
            raise NotFound(VEHICLE_NOT_FOUND)

        client = None
        if row["firstname"] and row["lastname"]:
            client = AssociatedClientOut(
                name=f"{row['firstname']} {row['lastname']}",
                email=row["email"],
            )
        return GdprDisclosureOut(
            vehicleId=row["id"],
            licensePlate=row["name"],
            brand=row["marque"],
            model=row["modele"],
            year=row["annee"],
            type=row["type"],
            registrationDate=row["created_at"],
            associatedClient=client,
        )

    # -------- Writes --------

    def create(self, payload: VehicleIn) -> VehicleCreatedOut:
        self._check_client(payload.client_id)
        if self.repo.plate_taken(payload.name):
            raise Conflict(PLATE_CONFLICT)
        try:
            vehicle_id = self.repo.insert(**self._fields(payload))
        except IntegrityError as exc:
            raise self._conflict_from(exc, payload.name)
        logger.info("Vehicle %s created with plate %s", vehicle_id, payload.name)
        return VehicleCreatedOut(id=vehicle_id)

    def update(self, vehicle_id: int, payload: VehicleIn) -> None:
        """
        Remplacement complet des champs éditables.
        L'existence est constatée par l'UPDATE lui-même (0 ligne -> NotFound).
        """
        self._check_client(payload.client_id)
        if self.repo.plate_taken(payload.name, exclude_id=vehicle_id):
            raise Conflict(PLATE_CONFLICT)
        fields = self._fields(payload)
        fields["updated_at"] = self.now_fn()
        try:
            affected = self.repo.update_by_id(vehicle_id, **fields)
        except IntegrityError as exc:
            raise self._conflict_from(exc, payload.name, exclude_id=vehicle_id)
        if affected == 0:
            raise NotFound(VEHICLE_NOT_FOUND)

    def delete(self, vehicle_id: int, *, actor_id: int) -> VehicleDeletedOut:
        target = self.repo.get(vehicle_id)
        if target is not None:
            self.audit.info(
                "RGPD Audit: Suppression véhicule %s %s %s par utilisateur %s à %s",
                target.name, target.marque, target.modele, actor_id, self.now_fn().isoformat(),
            )
        affected = self.repo.delete_by_id(vehicle_id)
        if affected == 0:
            raise NotFound(VEHICLE_NOT_FOUND)
        return VehicleDeletedOut()
