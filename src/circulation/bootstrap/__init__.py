"""Bootstrap (composition root) for CIRCULATION.

Assembles the application at runtime: picks the storage backend and clock,
wires them into the command handlers and queries, and builds the message bus.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `circulation.adapters`, `circulation.service_layer`,
  `circulation.interfaces`, `circulation.domain`, and `circulation.config`.
- Inner layers must not import `circulation.bootstrap`.
"""

from circulation.service_layer import commands

from .bootstrap import (
    AppContainer,
    LoanQueries,
    bootstrap,
    build_clock,
    build_memory_uow_factory,
    build_message_bus,
    build_sql_uow_factory,
    inject_dependencies,
)

__all__ = [
    "AppContainer",
    "LoanQueries",
    "bootstrap",
    "build_clock",
    "build_memory_uow_factory",
    "build_message_bus",
    "build_sql_uow_factory",
    "commands",
    "inject_dependencies",
]
