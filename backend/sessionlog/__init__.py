"""
SessionLog Backend — Application Package Initializer
=====================================================

What: Marks the `sessionlog` directory as a Python package.
Why:  Enables module imports like `from sessionlog.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a layered CRUD service:

    ┌─────────────────────────────────────┐
    │     Routes (one router per resource)│  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     ResourceController (services)   │  ← index/show/create/upsert/patch/destroy
    ├─────────────────────────────────────┤
    │     PersistenceStore (services)     │  ← key-based find/create/upsert/delete/save
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Persistence)          │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The `client` subpackage is the caller side: an async HTTP wrapper
    around the same REST surface.
"""

__version__ = "1.0.0"
