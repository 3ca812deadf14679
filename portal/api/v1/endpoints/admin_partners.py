"""
Partner Administration Endpoints Module

Full CRUD on partners. Every route requires the admin secret, checked by
``deps.AdminRoute`` before the request is parsed.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, status
from fastapi.exceptions import RequestValidationError

from portal.api import deps
from portal.schemas.common import PARTNER_ID_PATTERN
from portal.schemas.partner import PartnerCreate, PartnerRead, PartnerUpdate
from portal.storage import PortalStorage

router = APIRouter(route_class=deps.AdminRoute)


@router.get("", response_model=List[PartnerRead])
def list_partners(storage: PortalStorage = Depends(deps.get_storage)):
    """
    Retrieve all partners, ordered by id.
    """
    return storage.list_partners()


@router.post("", response_model=PartnerRead, status_code=status.HTTP_201_CREATED)
def create_partner(
    partner_in: PartnerCreate,
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Create a new partner.

    Args:
        partner_in: Partner data including its 4-digit id
        storage: Storage backing

    Returns:
        PartnerRead: The newly created partner

    Raises:
        400: If a field is invalid
        409: If a partner with this id already exists
    """
    return storage.create_partner(partner_in)


@router.get("/{partner_id}", response_model=PartnerRead)
def read_partner(
    partner_id: str = Path(pattern=PARTNER_ID_PATTERN),
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Get a specific partner by id.
    """
    return storage.get_partner(partner_id)


@router.put("/{partner_id}", response_model=PartnerRead)
def update_partner(
    partner_in: PartnerUpdate,
    partner_id: str = Path(pattern=PARTNER_ID_PATTERN),
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Replace a partner's contact details. The id itself cannot change.

    Raises:
        400: If a field is invalid or the body names a different id
        404: If the partner doesn't exist
    """
    if partner_in.id is not None and partner_in.id != partner_id:
        raise RequestValidationError([{
            "loc": ("body", "id"),
            "msg": "Partner ID cannot be changed",
            "type": "value_error",
        }])
    return storage.update_partner(partner_id, partner_in)


@router.delete("/{partner_id}")
def delete_partner(
    partner_id: str = Path(pattern=PARTNER_ID_PATTERN),
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Delete a partner.

    A partner that still has requests cannot be deleted; remove its requests
    first.

    Returns:
        dict: Success message

    Raises:
        404: If the partner doesn't exist
        409: If any request references the partner
    """
    storage.delete_partner(partner_id)
    return {"status": "success", "message": "Partner deleted successfully"}
