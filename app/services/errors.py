"""Domain errors raised by the store and export services, mapped to HTTP codes by the routers."""


class SmartBinError(Exception):
    """Base class for every error the service raises on purpose."""


class ValidationError(SmartBinError):
    """A required field is missing. Surfaced as HTTP 400."""


class StoreError(SmartBinError):
    """The database call failed. Surfaced as HTTP 500."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class EmptyResultError(SmartBinError):
    """An export matched no rows. Surfaced as HTTP 404."""
