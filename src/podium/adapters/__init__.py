"""Adapters (infrastructure) for PODIUM.

Provide concrete implementations of the ports declared in `podium.interfaces`
(event store, stream index, document sequences, clocks, ID generators), plus
persistence mapping and related wiring (engines, metadata, migrations).

Dependency rule: may import `podium.domain` and `podium.interfaces`; the
domain must not import this package.
"""
