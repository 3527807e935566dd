"""
Postboard Backend: Application Package
=======================================

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Validation (Pydantic request rule) │  ← runs before the handler body
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← PostService
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Each layer receives what it needs from the one above (sessions are
    injected, never imported), so each can be tested on its own.
"""

__version__ = "1.0.0"
