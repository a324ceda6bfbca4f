"""Exceptions raised by the data-access layer."""


class RepositoryError(RuntimeError):
    """A backend read failed (network, auth or schema)."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
