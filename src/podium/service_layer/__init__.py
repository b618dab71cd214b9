"""Service layer for PODIUM.

Implements application use-cases: command handlers, read views, the message
bus and transaction boundaries. Calls domain aggregates and the ports declared
in `podium.interfaces`.

Dependency rule: may import `podium.domain` and `podium.interfaces`, but not
`podium.adapters` or `podium.entrypoints`.
"""
