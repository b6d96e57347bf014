"""CouchDB API client.

This package provides the client library for talking to a CouchDB server
over its HTTP API: connection configuration, URI construction, request
building, and the database lifecycle (list, open, create, destroy).

Usage:
    from couch_tools.client import CouchClient, CouchConfig

    # Configure from environment (COUCH_URI, COUCH_DB_PREFIX, ...)
    client = CouchClient()
    db = client.open_database("albums")

    # Explicit configuration
    config = CouchConfig(uri="https://couch.example.com", db_prefix="test_")
    client = CouchClient(config=config)

    # Build a request, send it yourself
    response = client.send(client.get("_all_dbs", {"limit": "10"}))
"""

from .config import CouchConfig
from .database import Database
from .exceptions import (
    ConfigurationError,
    CouchError,
    DecodeError,
    ServerError,
    TransportError,
)
from .http import CouchClient
from .models import (
    CouchResponse,
    CouchStatus,
    CouchVendor,
    DatabaseIndexList,
    DesignCreated,
    Index,
    IndexCreated,
    IndexFields,
)

__all__ = [
    "ConfigurationError",
    "CouchClient",
    "CouchConfig",
    "CouchError",
    "CouchResponse",
    "CouchStatus",
    "CouchVendor",
    "Database",
    "DatabaseIndexList",
    "DecodeError",
    "DesignCreated",
    "Index",
    "IndexCreated",
    "IndexFields",
    "ServerError",
    "TransportError",
]
