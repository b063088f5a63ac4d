"""Services Layer — stores, ledgers, gates and request handlers.

Invariants:
    - Services depend on core protocols, never on FastAPI
    - One handler module per resource (handle_*.py)

Design Decisions:
    - Handlers are reused by the migration engine so migrated drafts pass
      the same validation, moderation and quota checks as live requests
"""
