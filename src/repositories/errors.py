class RepositoryError(Exception):
    """Base class for errors raised by park repositories."""


class ParkNotFoundError(RepositoryError):
    def __init__(self, park_code):
        self.park_code = park_code
        super().__init__(f"Park with code '{park_code}' not found")


class ParkConflictError(RepositoryError):
    """A park with the same code already exists, or the insert was not confirmed."""

    def __init__(self, park_code, reason=None):
        self.park_code = park_code
        message = f"Park with code '{park_code}' could not be stored"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ParkValidationError(RepositoryError):
    pass


class OperationNotSupportedError(RepositoryError):
    """The backend does not implement this operation."""

    def __init__(self, operation, backend):
        self.operation = operation
        self.backend = backend
        super().__init__(f"{backend} does not support '{operation}'")


class StorageUnavailableError(RepositoryError):
    """The underlying store could not be reached or the query failed."""
