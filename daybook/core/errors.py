"""Domain errors raised by services and translated to HTTP by the API layer."""


class DaybookError(Exception):
    """Base class for errors the API surfaces to clients."""


class StorageUnavailableError(DaybookError, RuntimeError):
    """The database or blob storage could not be reached or is not configured."""


class NoDataForPeriodError(DaybookError, ValueError):
    """An aggregation was requested over a window without mood records."""

    def __init__(self, message: str = "No mood data available for this period") -> None:
        super().__init__(message)


class ForbiddenError(DaybookError):
    """The caller may not modify the targeted record."""


class NotFoundError(DaybookError, LookupError):
    """The targeted record does not exist."""
