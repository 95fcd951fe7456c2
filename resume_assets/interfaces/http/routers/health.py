"""Liveness endpoint."""
from fastapi import APIRouter

from resume_assets import __version__
from resume_assets.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
