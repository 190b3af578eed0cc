"""
Snippet Manager Backend — Application Package Initializer
==========================================================

What: Marks the `snippet_manager` directory as a Python package.
Why:  Enables module imports like `from snippet_manager.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth guard
    ├─────────────────────────────────────┤
    │        Validators (Boundary)        │  ← Shape/length/enum checks
    ├─────────────────────────────────────┤
    │    Services (Snippets, AI assist)   │  ← Queries, prompts, retries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (hosted Postgres + RLS)  │  ← Request-scoped sessions
    └─────────────────────────────────────┘

    Authentication and row-level authorization live in the hosted backend;
    this package only forwards the caller's identity to it.
"""

__version__ = "1.0.0"
