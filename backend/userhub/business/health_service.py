"""
UserHub Backend — Health Service
==================================

What:  Aggregates dependency probes into a HealthResponse.
How:   Asks the repository for a lightweight ping; the api layer never
       touches storage itself.

Status levels:
    - healthy:   storage reachable (HTTP 200)
    - unhealthy: storage unreachable (HTTP 503, stop routing traffic)
"""

import time

from userhub import __version__
from userhub.data_access.repositories.base import UserRepository
from userhub.shared.dtos import HealthResponse


class HealthService:

    def __init__(self, repository: UserRepository):
        self._repository = repository
        self._started_at = time.monotonic()

    async def check(self) -> HealthResponse:
        storage_ok = await self._repository.ping()
        return HealthResponse(
            status="healthy" if storage_ok else "unhealthy",
            version=__version__,
            storage="connected" if storage_ok else "disconnected",
            uptime_seconds=round(time.monotonic() - self._started_at, 2),
        )
