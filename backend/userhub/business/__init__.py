"""
UserHub Backend — Business Logic Layer
========================================

What:  Services sitting between the api layer (HTTP) and data_access (storage).
How:   Each service depends on repository contracts handed to it at
       construction and returns Shared DTOs, never entities.

Service Inventory:
    - UserService (abstract) / DefaultUserService: user lookup and CRUD
    - HealthService: dependency probes for GET /health
"""

from userhub.business.health_service import HealthService
from userhub.business.user_service import DefaultUserService, UserService

__all__ = ["DefaultUserService", "HealthService", "UserService"]
