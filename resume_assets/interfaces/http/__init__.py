"""HTTP interface: routers, dependencies and middleware."""

from fastapi import APIRouter

from resume_assets.interfaces.http.routers import assets, internal


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(assets.router, prefix="/assets", tags=["assets"])
    router.include_router(internal.router, prefix="/internal", tags=["internal"])
    return router


__all__ = ["create_api_router"]
