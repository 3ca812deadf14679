from fastapi import APIRouter
from portal.api.v1.endpoints import (
    health, partners, service_requests, admin_partners, admin_requests
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

# Public endpoints
api_router.include_router(partners.router, prefix="/partners", tags=["partners"])
api_router.include_router(service_requests.router, prefix="/requests", tags=["requests"])

# Admin endpoints - the routers' AdminRoute checks the shared secret on every call
api_router.include_router(admin_partners.router, prefix="/admin/partners", tags=["admin"])
api_router.include_router(admin_requests.router, prefix="/admin/requests", tags=["admin"])
