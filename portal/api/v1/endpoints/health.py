from fastapi import APIRouter, Depends
from typing import Any

from portal.api import deps
from portal.storage import PortalStorage

router = APIRouter()


@router.get("", response_model=dict[str, Any])
def health_check(storage: PortalStorage = Depends(deps.get_storage)) -> Any:
    """
    Health check endpoint. Fails with 500 if the storage backing is unreachable.
    """
    storage.ping()
    return {"status": "ok", "storage": storage.name}
