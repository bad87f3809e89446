"""
CrudHub Backend — Application Package Initializer
==================================================

What: Marks the `crudhub` directory as a Python package.
Why:  Enables module imports like `from crudhub.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    Every resource (teas, biscuits, games, ...) is served by the same code path:

    ┌─────────────────────────────────────┐
    │      Routes (generic CRUD router)   │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Resource Registry            │  ← which collection backs which prefix
    ├─────────────────────────────────────┤
    │     Collections (Collection ABC)    │  ← memory or document store
    ├─────────────────────────────────────┤
    │   Document Store (async SQLAlchemy) │  ← JSON documents per collection
    └─────────────────────────────────────┘

    The router never knows which collection it talks to; the resource name is
    chosen by whoever mounts it under a path prefix.
"""

__version__ = "1.0.0"
