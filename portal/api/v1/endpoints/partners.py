"""
Partner Lookup Endpoint Module

Public, read-only lookup of a partner's contact record by its 4-digit id.
"""
from fastapi import APIRouter, Depends, Path

from portal.api import deps
from portal.schemas.common import PARTNER_ID_PATTERN
from portal.schemas.partner import PartnerRead
from portal.storage import PortalStorage

router = APIRouter()


@router.get("/{partner_id}", response_model=PartnerRead)
def read_partner(
    partner_id: str = Path(pattern=PARTNER_ID_PATTERN),
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Look up a partner by id.

    Args:
        partner_id: 4-digit partner identifier
        storage: Storage backing

    Returns:
        PartnerRead: The partner's contact record

    Raises:
        400: If the id is not exactly 4 digits
        404: If no partner has this id
    """
    return storage.get_partner(partner_id)
