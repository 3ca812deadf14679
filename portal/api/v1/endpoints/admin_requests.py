"""
Request Administration Endpoints Module

Full CRUD on service requests. Every route requires the admin secret,
checked by ``deps.AdminRoute`` before the request is parsed.
"""
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status

from portal.api import deps
from portal.api.v1.endpoints.service_requests import submit_request
from portal.schemas.request import RequestCreate, RequestRead, RequestUpdate
from portal.services.notifier import RequestNotifier
from portal.storage import PortalStorage

router = APIRouter(route_class=deps.AdminRoute)


@router.get("", response_model=List[RequestRead])
def list_requests(storage: PortalStorage = Depends(deps.get_storage)):
    """
    Retrieve all requests, newest first, each with its partner's name.
    """
    return storage.list_requests()


@router.post("", response_model=RequestRead, status_code=status.HTTP_201_CREATED)
def create_request(
    request_in: RequestCreate,
    background_tasks: BackgroundTasks,
    storage: PortalStorage = Depends(deps.get_storage),
    notifier: RequestNotifier = Depends(deps.get_notifier),
):
    """
    Create a request on behalf of a partner.

    Raises:
        400: If a field is invalid or the partner does not exist
    """
    return submit_request(request_in, storage, notifier, background_tasks)


@router.get("/{request_id}", response_model=RequestRead)
def read_request(
    request_id: str,
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Get a specific request by id.

    Raises:
        404: If the request doesn't exist
    """
    return storage.get_request(request_id)


@router.put("/{request_id}", response_model=RequestRead)
def update_request(
    request_id: str,
    request_in: RequestUpdate,
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Replace a request's fields. Its id and creation time never change.

    Raises:
        400: If a field is invalid or the new partner does not exist
        404: If the request doesn't exist
    """
    return storage.update_request(request_id, request_in)


@router.delete("/{request_id}")
def delete_request(
    request_id: str,
    storage: PortalStorage = Depends(deps.get_storage),
):
    """
    Delete a request.

    Returns:
        dict: Success message

    Raises:
        404: If the request doesn't exist
    """
    storage.delete_request(request_id)
    return {"status": "success", "message": "Request deleted successfully"}
