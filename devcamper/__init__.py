"""
DevCamper API — Application Package Initializer
================================================

What: Marks the `devcamper` directory as a Python package.
Why:  Enables module imports like `from devcamper.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service follows the same layered architecture throughout:

    ┌─────────────────────────────────────┐
    │   Routes + Guard Dependencies       │  ← HTTP concerns, auth, list queries
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership rules, aggregates, email
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Configuration is assembled once in `create_app()` and handed down to the
    components that need it; nothing below the app factory reads the
    environment on its own.
"""

__version__ = "1.0.0"
