"""Service layer (application core) for CIRCULATION.

Orchestrates the loan lifecycle: command handlers run borrow, return and renew
as single units of work, queries read loans and fines, and the message bus
dispatches commands and retries those that lose a concurrency race.

Dependency rule: may import `circulation.domain` and `circulation.interfaces`;
never imports adapters, bootstrap or entrypoints.
"""
