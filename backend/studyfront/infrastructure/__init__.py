"""Infrastructure Layer — external service clients, storage media and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Remote calls map every failure to UpstreamServiceError (core/errors.py)
"""
