"""Adapters (infrastructure) for CIRCULATION.

Provide concrete implementations of the ports in `circulation.interfaces`:
in-memory and SQLAlchemy-backed stores and units of work, clocks, id
generators, plus database engines, metadata, schema and migrations.

Dependency rule: may import `circulation.domain` and `circulation.interfaces`;
neither of those may import this package.
"""
