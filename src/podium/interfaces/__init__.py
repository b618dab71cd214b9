"""Interfaces (application boundary) for PODIUM.

Defines framework-free application contracts: protocols/ABCs and small DTOs
shared by the service layer and adapters (event store, stream index, document
sequences, clocks, ID generators, unit of work). Business rules stay out of
this package.

Dependency rule: this package is independent; do not import from any
`podium.*` modules outside `podium.interfaces`. It may be imported by
`podium.service_layer`, `podium.adapters`, and `podium.bootstrap`.
"""
