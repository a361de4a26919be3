"""Exception hierarchy for surql."""


class SurqlError(Exception):
    """Base exception for all surql errors."""


class WriterError(SurqlError):
    """Invalid configuration of a query writer."""


class QueryPreconditionError(SurqlError):
    """A query writer cannot be compiled in its current state."""


class SerializationError(SurqlError):
    """Failed to render a Python value as a SurrealQL literal."""


class ResultError(SurqlError):
    """A query result does not match the writer's declared quantity."""


class ResultValidationError(ResultError):
    """A query result failed validation against the attached schema."""

    def __init__(self, message: str, errors: list | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
