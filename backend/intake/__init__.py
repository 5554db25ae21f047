"""
Form Intake Service — Application Package
==========================================

What: Backend that accepts study-abroad, work-abroad and investment inquiry
      forms, stores each one in its own table and emails a summary.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (submit, notify by mail) │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
