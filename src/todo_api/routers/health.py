from __future__ import annotations

from fastapi import APIRouter

from ..schemas import HealthOut

router = APIRouter(tags=["health"])


# PUBLIC_INTERFACE
@router.get("/health", response_model=HealthOut, summary="Health Check")
def health_check() -> HealthOut:
    """
    Health check endpoint. Never touches the store.

    Returns:
        A static JSON object indicating service health.
    """
    return HealthOut()
