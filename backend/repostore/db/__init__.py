"""Database primitives - the declarative Base shared by every model and by Alembic.

Invariants:
    - All sessions are async (AsyncSession), opened through DatabaseSessionManager
"""
