"""Packaged Alembic migration scripts for CIRCULATION."""
