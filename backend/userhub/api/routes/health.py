"""
UserHub Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Delegates to HealthService; answers 503 when storage is unreachable
       so load balancers route traffic away.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from userhub.api.dependencies import get_health_service
from userhub.business import HealthService
from userhub.shared.dtos import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Storage unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    service: HealthService = Depends(get_health_service),
) -> HealthResponse:
    result = await service.check()
    if result.status != "healthy":
        logger.warning("Health check: storage %s", result.storage)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result
