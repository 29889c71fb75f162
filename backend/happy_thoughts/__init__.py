"""
Happy Thoughts API — Application Package Initializer
=====================================================

What: Marks the `happy_thoughts` directory as a Python package.
Who:  Imported by uvicorn (`happy_thoughts.main:app`), Alembic and pytest.

Architecture Note:
    The service keeps the usual layered split:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, pagination, likes
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Explicit async store handle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
