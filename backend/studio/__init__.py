"""
EdAiVi Studio Backend: Application Package
==========================================

What: Marks the `studio` directory as a Python package.
Who:  Imported by uvicorn (`studio.main:app`), pytest and the seed helpers.

Layering:

    ┌─────────────────────────────────────┐
    │     Routes (HTTP + WebSocket)       │  ← status codes, headers, auth deps
    ├─────────────────────────────────────┤
    │     Services (business rules)       │  ← ownership, credit gate, stream FSM
    ├─────────────────────────────────────┤
    │     Models & Schemas (data)         │  ← Pydantic documents + API contracts
    ├─────────────────────────────────────┤
    │     Database (repositories)         │  ← in-memory document store
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
