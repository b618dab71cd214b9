"""Entrypoints (inbound adapters) for PODIUM.

The `podium` CLI lives here. Commands parse and validate input, dispatch
commands through the message bus built by `podium.bootstrap`, read through
`podium.service_layer.views`, and render the result.

Dependency rule: may import `podium.bootstrap` and `podium.service_layer`;
avoid importing `podium.adapters` directly (the `db` group is the exception,
it manages the schema itself).
"""
