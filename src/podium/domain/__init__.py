"""Domain layer for PODIUM.

Contains business rules: aggregates, value objects, lifecycle machines, pure
financial and discount derivations, and domain events. This package is
deliberately technology-agnostic.

Dependency rule: do not import from `podium.adapters` or `podium.entrypoints`.
"""
