"""Database handle."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

if TYPE_CHECKING:
    from .http import CouchClient, QueryParams


def quote_name(name: str) -> str:
    """Percent-encode a database name as a single path segment."""
    return quote(name, safe="")


@dataclass(frozen=True)
class Database:
    """A named database on a CouchDB server.

    Obtained from ``CouchClient.open_database`` or
    ``CouchClient.create_database``; the name already includes the client's
    prefix. The handle holds no server state of its own.
    """

    name: str
    client: "CouchClient"

    @property
    def path(self) -> str:
        """Encoded path of the database relative to the server root."""
        return quote_name(self.name)

    def build_request(
        self,
        method: str,
        path: str = "",
        params: "QueryParams | None" = None,
        body: Any = None,
    ) -> httpx.Request:
        """Build a request for a resource inside this database.

        Args:
            method: HTTP method
            path: Path below the database (e.g. "_index"), unencoded slashes
                are kept as separators
            params: Optional query parameters
            body: Optional request body

        Returns:
            Unsent request; pass it to ``client.send``
        """
        target = f"{self.path}/{path.lstrip('/')}" if path else self.path
        return self.client.build_request(method, target, params=params, body=body)
