"""Database Package — SQLAlchemy declarative base shared by all ORM models.

Invariants:
    - Single Base for all models; alembic reads Base.metadata
"""
