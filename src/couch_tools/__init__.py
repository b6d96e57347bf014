"""Couch Tools - Client library for the CouchDB HTTP API."""

from couch_tools.client import CouchClient, Database
from couch_tools.client.config import CouchConfig
from couch_tools.client.exceptions import (
    ConfigurationError,
    CouchError,
    DecodeError,
    ServerError,
    TransportError,
)

try:
    from importlib.metadata import version
    __version__ = version("couch-tools")
except Exception:
    __version__ = "0.1.0"  # Fallback for development

__all__ = [
    "ConfigurationError",
    "CouchClient",
    "CouchConfig",
    "CouchError",
    "Database",
    "DecodeError",
    "ServerError",
    "TransportError",
    "__version__",
]
