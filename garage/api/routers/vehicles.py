from typing import List

from fastapi import APIRouter, Depends, status

from garage.api.dependencies import csrf_guard, get_vehicle_id, get_vehicle_service, require_admin
from garage.features.authentication.services import Principal
from garage.features.authentication.schemas import MessageOut
from garage.features.vehicles.schemas import (
    GdprDisclosureOut,
    VehicleCreatedOut,
    VehicleDeletedOut,
    VehicleIn,
    VehicleOut,
)
from garage.features.vehicles.services import VehicleService

router = APIRouter(
    prefix="/vehicules",
    tags=["vehicules"],
    responses={
        401: {"description": "Non authentifié"},
        403: {"description": "Rôle admin requis"},
    },
)



@router.get(
    "",
    summary="Lister les véhicules",
    description="Chaque accès est tracé (audit RGPD).",
    response_model=List[VehicleOut],
)
def list_vehicles(
    principal: Principal = Depends(require_admin),
    svc: VehicleService = Depends(get_vehicle_service),
):
    return svc.list(actor_id=principal.user_id)

@router.post(
    "",
    summary="Ajouter un véhicule",
    status_code=status.HTTP_201_CREATED,
    response_model=VehicleCreatedOut,
    responses={
        400: {"description": "Données invalides"},
        409: {"description": "Plaque déjà enregistrée"},
    },
)
def create_vehicle(
    payload: VehicleIn,
    principal: Principal = Depends(require_admin),
    _csrf: None = Depends(csrf_guard),
    svc: VehicleService = Depends(get_vehicle_service),
):
    return svc.create(payload)

@router.put(
    "/{vehicle_id}",
    summary="Modifier un véhicule (remplacement complet)",
    response_model=MessageOut,
    responses={
        400: {"description": "Données invalides"},
        404: {"description": "Véhicule non trouvé"},
        409: {"description": "Plaque déjà enregistrée"},
    },
)
def update_vehicle(
    payload: VehicleIn,
    principal: Principal = Depends(require_admin),
    vehicle_id: int = Depends(get_vehicle_id),
    _csrf: None = Depends(csrf_guard),
    svc: VehicleService = Depends(get_vehicle_service),
):
    svc.update(vehicle_id, payload)
    return MessageOut(message="Véhicule modifié avec succès")

@router.delete(
    "/{vehicle_id}",
    summary="Supprimer un véhicule (droit à l'effacement)",
    response_model=VehicleDeletedOut,
    responses={
        400: {"description": "ID véhicule invalide"},
        404: {"description": "Véhicule non trouvé"},
    },
)
def delete_vehicle(
    principal: Principal = Depends(require_admin),
    vehicle_id: int = Depends(get_vehicle_id),
    _csrf: None = Depends(csrf_guard),
    svc: VehicleService = Depends(get_vehicle_service),
):
    return svc.delete(vehicle_id, actor_id=principal.user_id)

@router.get(
    "/{vehicle_id}/gdpr-data",
    summary="Export RGPD des données d'un véhicule (droit d'accès)",
    response_model=GdprDisclosureOut,
    responses={
        400: {"description": "ID véhicule invalide"},
        404: {"description": "Véhicule non trouvé"},
    },
)
def vehicle_gdpr_data(
    principal: Principal = Depends(require_admin),
    vehicle_id: int = Depends(get_vehicle_id),
    svc: VehicleService = Depends(get_vehicle_service),
):
    return svc.gdpr_disclosure(vehicle_id)
