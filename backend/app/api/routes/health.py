"""Health Probe — liveness endpoint for container orchestration.

Invariants:
    - GET /health/ always returns 200 if the process is up
    - Reports the configured collection size (fixed at startup)
"""

import logging
from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_state_service
from app.services.state_service import StateService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(service: StateService = Depends(get_state_service)):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "success": True,
        "status": "healthy",
        "service": "million-list-api",
        "version": "1.0.0",
        "itemsCount": len(service.store.base_sequence),
    }
