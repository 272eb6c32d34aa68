"""
SnackTrack Backend - Application Package
=========================================

What: Office snack and drink request tracker (FastAPI + async SQLAlchemy).
Who:  Imported by uvicorn (`snacktrack.main:app`), `python -m snacktrack`, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verb + path → service call
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← one method per operation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine, pool, sessions
    └─────────────────────────────────────┘

    Routes never touch SQL; services never touch HTTP status codes.
    Services raise exceptions from `snacktrack.exceptions` and the global
    handlers in `snacktrack.main` turn them into `{"error": ...}` bodies.
"""

__version__ = "1.0.0"
