"""Exceptions raised by the fleet data-access layer."""


class FleetError(Exception):
    """Base class for all fleet errors."""


class DataAccessError(FleetError):
    """
    Raised when the underlying storage fails.

    The message names the attempted operation and the affected entity or id;
    ``cause`` keeps the original exception (it is also chained as
    ``__cause__`` by the raising code).
    """

    def __init__(self, message: str, cause: BaseException):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}"
