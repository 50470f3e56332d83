"""Domain layer for CIRCULATION.

Contains the business rules of circulation: the lending policy, the book,
member and loan records, the fine calculator and the eligibility checker.
Everything here is pure and deterministic; the current date is always passed
in by the caller.

Dependency rule: do not import from `circulation.adapters`,
`circulation.service_layer` or `circulation.entrypoints`.
"""
