"""Database Infrastructure — SQLAlchemy Base and shared column types.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)
"""
