"""
UserHub Backend — Route Dependencies
======================================

What:  FastAPI dependency providers handing business services to routes.
How:   The composition root stores a bootstrap.Services bundle on
       app.state.services at startup; these providers read it back per
       request. Routes only ever see business contracts.

Testing:
    Either build the app with different services (create_app(services=...))
    or override a provider:
        app.dependency_overrides[get_user_service] = lambda: fake_service
"""

from fastapi import Request

from userhub.business import HealthService, UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.services.user_service


def get_health_service(request: Request) -> HealthService:
    return request.app.state.services.health_service
