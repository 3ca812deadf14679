"""
API Dependencies Module

This module provides FastAPI dependency functions that hand request handlers
the objects the application was built with (settings, storage backing and
notifier), plus the shared-secret check guarding the admin routes.
"""
import secrets
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.routing import APIRoute
from fastapi.security.utils import get_authorization_scheme_param

from portal.core.config import Settings
from portal.core.errors import UnauthorizedError
from portal.services.notifier import RequestNotifier
from portal.storage import PortalStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> PortalStorage:
    return request.app.state.storage


def get_notifier(request: Request) -> RequestNotifier:
    return request.app.state.notifier


def check_admin_secret(settings: Settings, authorization: Optional[str]) -> None:
    """
    Require the configured admin secret.

    The secret must be sent on every admin call as
    ``Authorization: Bearer <secret>``; there is no session.

    Raises:
        UnauthorizedError: If the header is missing or the secret is wrong
    """
    scheme, credentials = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "bearer" or not credentials:
        raise UnauthorizedError("Not authenticated")

    # Constant-time comparison
    if not secrets.compare_digest(
        credentials.encode("utf-8"), settings.ADMIN_SECRET.encode("utf-8")
    ):
        raise UnauthorizedError("Invalid admin secret")


class AdminRoute(APIRoute):
    """
    Route class for admin routers.

    The secret is checked before FastAPI reads the body or the path
    parameters, so an unauthenticated call gets 401 even when its payload
    is malformed.

    Usage: APIRouter(route_class=AdminRoute)
    """

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def admin_handler(request: Request) -> Response:
            check_admin_secret(get_settings(request), request.headers.get("Authorization"))
            return await handler(request)

        return admin_handler
