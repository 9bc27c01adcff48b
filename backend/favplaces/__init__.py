"""
Favorite Places — Package Initializer
======================================

What: Marks the `favplaces` directory as a Python package.
Who:  Imported by uvicorn (`favplaces.main:app`), pytest, and client code.

Architecture Note:
    The package holds both halves of the system:

    ┌─────────────────────────────────────┐
    │      client/ (Synchronizer side)    │  ← optimistic cache, transport
    ├─────────────────────────────────────┤
    │           routes/ (API Layer)       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         services/ (Stores)          │  ← catalog + favorites rules
    ├─────────────────────────────────────┤
    │      JSON documents (Persistence)   │  ← places.json, user-places.json
    └─────────────────────────────────────┘

    The client talks to the API only over HTTP; it never imports the services.
    Shared pieces are the Place schema and the exception hierarchy.
"""

__version__ = "1.0.0"
