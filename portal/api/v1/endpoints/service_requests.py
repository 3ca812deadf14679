"""
Request Submission Endpoint Module

Public submission of a service request against an existing partner.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, status

from portal.api import deps
from portal.schemas.request import RequestCreate, RequestRead
from portal.services.notifier import RequestNotifier
from portal.storage import PortalStorage

router = APIRouter()


def submit_request(
    request_in: RequestCreate,
    storage: PortalStorage,
    notifier: RequestNotifier,
    background_tasks: BackgroundTasks,
) -> RequestRead:
    """Store a request, then queue the notification to run after the response."""
    created = storage.create_request(request_in)
    background_tasks.add_task(notifier.notify, created)
    return created


@router.post("", response_model=RequestRead, status_code=status.HTTP_201_CREATED)
def create_request(
    request_in: RequestCreate,
    background_tasks: BackgroundTasks,
    storage: PortalStorage = Depends(deps.get_storage),
    notifier: RequestNotifier = Depends(deps.get_notifier),
):
    """
    Submit a new service request.

    The id and creation timestamp are assigned by the server; values sent by
    the client for them are ignored.

    Returns:
        RequestRead: The stored request

    Raises:
        400: If a field is invalid or the partner does not exist
    """
    return submit_request(request_in, storage, notifier, background_tasks)
