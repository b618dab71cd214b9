"""Errors raised by event-sourced repositories."""


class RepositoryError(Exception):
    """Something went wrong loading or saving an aggregate."""


class AggregateNotFoundError(RepositoryError):
    """The requested stream holds no events."""

    def __init__(self, aggregate_type_name: str, aggregate_id: str):
        self.aggregate_type_name = aggregate_type_name
        self.aggregate_id = aggregate_id
        super().__init__(f"no {aggregate_type_name} stream {aggregate_id!r}")
