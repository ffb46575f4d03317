"""
UserHub Backend — Configuration & Composition Tests
=====================================================

What we test:
    ✅ Settings validation (log level, retry window)
    ✅ build_services picks the repository variant from storage_backend
    ✅ SQL startup/shutdown hooks create the schema and dispose the engine
    ✅ create_app runs the hooks through the lifespan
"""

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError as SettingsValidationError

from userhub.bootstrap import Services, build_services
from userhub.config import Settings
from userhub.main import create_app


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:

    def test_log_level_is_normalized(self):
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(SettingsValidationError):
            _settings(log_level="LOUD")

    def test_retry_window_must_not_shrink(self):
        with pytest.raises(SettingsValidationError):
            _settings(db_retry_initial_wait=1.0, db_retry_max_wait=0.5)

    def test_cors_origins_list(self):
        settings = _settings(cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestBuildServices:

    @pytest.mark.asyncio
    async def test_memory_backend(self):
        services = build_services(_settings(storage_backend="memory"))

        await services.startup()
        health = await services.health_service.check()
        await services.shutdown()

        assert health.status == "healthy"

    @pytest.mark.asyncio
    async def test_sql_backend_creates_schema_on_startup(self, tmp_path):
        services = build_services(
            _settings(
                storage_backend="sql",
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'boot.db'}",
                db_auto_create_schema=True,
                db_retry_attempts=1,
            )
        )

        await services.startup()
        try:
            page = await services.user_service.list_users(limit=10, offset=0)
            assert page.total == 0
            assert (await services.health_service.check()).storage == "connected"
        finally:
            await services.shutdown()


@pytest.mark.asyncio
async def test_app_lifespan_runs_hooks():
    calls = []

    base = build_services(_settings(storage_backend="memory"))

    async def startup():
        calls.append("startup")

    async def shutdown():
        calls.append("shutdown")

    services = Services(
        user_service=base.user_service,
        health_service=base.health_service,
        startup=startup,
        shutdown=shutdown,
    )
    app = create_app(settings=_settings(storage_backend="memory"), services=services)

    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/health")).status_code == 200

    assert calls == ["startup", "shutdown"]
