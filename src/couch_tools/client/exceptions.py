"""Custom exceptions for the CouchDB client."""



class CouchError(Exception):
    """Base exception for all couch-tools errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(CouchError):
    """Base URI or request path cannot form a valid URI."""
    pass


class TransportError(CouchError):
    """Network failure, timeout, or the HTTP client could not be built."""
    pass


class DecodeError(CouchError):
    """Response body is not the JSON shape we expected."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


class ServerError(CouchError):
    """The server's response envelope reported a failure."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "unspecified error")
