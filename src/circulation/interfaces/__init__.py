"""Interfaces (application boundary) for CIRCULATION.

Defines framework-free contracts shared by the service layer and adapters:
the book, member and loan stores, the unit of work, the clock and id
generators, plus the storage error taxonomy. Business rules stay out of this
package.

Dependency rule: may import `circulation.domain` for record types only. It is
imported by `circulation.service_layer`, `circulation.adapters` and
`circulation.bootstrap`.
"""
