"""
UserHub Backend — Application Package Initializer
==================================================

What: Marks the `userhub` directory as a Python package.
Who:  Used by uvicorn (`uvicorn userhub.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into four layers with a one-way dependency rule:

    ┌─────────────────────────────────────┐
    │      api (Request Handling)         │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      business (Business Logic)      │  ← Validation, Entity → DTO mapping
    ├─────────────────────────────────────┤
    │      data_access (Persistence)      │  ← Repositories, ORM entities
    └─────────────────────────────────────┘
              shared (DTOs, identifiers, errors), used by all three

    api never imports data_access. The composition root (bootstrap.py,
    main.py) is the only place that sees every layer; it builds the concrete
    repository and services once at startup and hands them to the api layer
    through app.state.
"""

__version__ = "1.0.0"
