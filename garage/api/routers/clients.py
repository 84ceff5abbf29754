from typing import List

from fastapi import APIRouter, Depends

from garage.api.dependencies import get_client_service, require_admin
from garage.features.authentication.services import Principal
from garage.features.users.schemas import CountOut, UserOut
from garage.features.users.services import ClientService

router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    responses={401: {"description": "Non authentifié"}, 403: {"description": "Rôle admin requis"}},
)

@router.get(
    "/count",
    summary="Compter les clients",
    response_model=CountOut,
)
def count_clients(
    principal: Principal = Depends(require_admin),
    svc: ClientService = Depends(get_client_service),
):
    return CountOut(count=svc.count())

@router.get(
    "",
    summary="Lister les clients",
    response_model=List[UserOut],
)
def list_clients(
    principal: Principal = Depends(require_admin),
    svc: ClientService = Depends(get_client_service),
):
    return [UserOut.model_validate(u) for u in svc.list()]
