"""
Blog API — Application Package Initializer
============================================

What: Marks the `blogapi` directory as a Python package.
Why:  Enables module imports like `from blogapi.config import settings`.
Who:  Used by Alembic, pytest and uvicorn (`uvicorn blogapi.main:app`).

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Query composition)    │  ← Filters, sorting, CRUD rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
