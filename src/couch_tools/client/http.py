"""HTTP access to a CouchDB server.

This module builds request URIs against the configured server, sends them
through an httpx transport, and implements the database lifecycle calls
(list, open, create, destroy) on top of that.
"""

import json
import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import CouchConfig
from .database import Database, quote_name
from .exceptions import ConfigurationError, DecodeError, ServerError, TransportError
from .models import CouchResponse, CouchStatus

logger = logging.getLogger("couch-tools")

QueryParams = Mapping[str, str] | Sequence[tuple[str, str]]

_db_names = TypeAdapter(list[str])
_envelope = TypeAdapter(CouchResponse)
_status = TypeAdapter(CouchStatus)


def _transport_settings(config: CouchConfig) -> tuple:
    return (config.gzip, config.timeout, config.verify_ssl)


def _encode_body(body: Any) -> bytes | str | None:
    """Serialize a request body to JSON unless it is already raw content."""
    if body is None or isinstance(body, (str, bytes)):
        return body
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True)
    return json.dumps(body)


class CouchClient:
    """Connection to one CouchDB server.

    Owns the connection configuration and the underlying ``httpx.Client``.
    Requests are built and sent in two steps: ``get``/``put``/... return an
    unsent ``httpx.Request`` and ``send`` executes it. The lifecycle methods
    (``open_database``, ``create_database``, ...) do both and decode the
    response.

    Changing the timeout or compression rebuilds the transport. The swap is
    atomic; requests already sent on the old transport are left alone, and
    replaced transports are closed with the client.

    Usage:
        client = CouchClient("http://localhost:5984")
        db = client.open_database("albums")

    Or as context manager:
        with CouchClient(config=CouchConfig(db_prefix="test_")) as client:
            names = client.list_database_names()
    """

    def __init__(
        self,
        uri: str | None = None,
        *,
        config: CouchConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client and build its transport.

        Args:
            uri: Base URI of the server. Overrides ``config.uri`` if both given.
            config: Connection configuration. If None, loads from environment.
            transport: Optional httpx transport every built client sends
                through (for testing/advanced use).

        Raises:
            ConfigurationError: If the base URI is not an absolute http(s) URI.
            TransportError: If the HTTP client cannot be built.
        """
        try:
            config = config.model_copy() if config is not None else CouchConfig()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        if uri is not None:
            config = config.model_copy(update={"uri": uri})

        self.config = config
        self._transport = transport
        self._lock = threading.Lock()
        self._retired: list[httpx.Client] = []
        self._parse_base()
        self._client = self._build_transport(config)

    def __enter__(self) -> "CouchClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close transport."""
        self.close()

    def __repr__(self) -> str:
        return f"<CouchClient {self.config.uri!r} prefix={self.config.db_prefix!r}>"

    @property
    def uri(self) -> str:
        return self.config.uri

    @property
    def db_prefix(self) -> str:
        return self.config.db_prefix

    @property
    def http_client(self) -> httpx.Client:
        """The HTTP client currently used for new requests."""
        with self._lock:
            return self._client

    def close(self) -> None:
        """Close the current transport and every one it replaced."""
        with self._lock:
            clients, self._retired = [*self._retired, self._client], []
        for client in clients:
            client.close()

    # Configuration

    def set_uri(self, uri: str) -> None:
        """Point the client at another server. Not validated until used."""
        with self._lock:
            self.config = self.config.model_copy(update={"uri": uri})

    def set_name_prefix(self, prefix: str) -> None:
        with self._lock:
            self.config.db_prefix = prefix

    def set_compression(self, enabled: bool) -> None:
        """Enable or disable compressed responses and rebuild the transport.

        Raises:
            ConfigurationError: If ``enabled`` is not a boolean.
            TransportError: If the new transport cannot be built.
        """
        self._rebuild(gzip=enabled)

    def set_timeout(self, seconds: int) -> None:
        """Change the per-request timeout and rebuild the transport.

        Raises:
            ConfigurationError: If ``seconds`` is outside 1-255.
            TransportError: If the new transport cannot be built.
        """
        self._rebuild(timeout=seconds)

    def _updated(self, changes: dict[str, Any]) -> CouchConfig:
        config = self.config.model_copy()
        try:
            for name, value in changes.items():
                setattr(config, name, value)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        return config

    def _rebuild(self, **changes: Any) -> None:
        """Build a transport for ``changes`` and swap it in.

        The transport is built outside the lock. If the transport settings
        changed meanwhile, the stale client is retired unused and the build
        is retried against the current config.
        """
        with self._lock:
            config = self._updated(changes)
        while True:
            client = self._build_transport(config)
            with self._lock:
                current = self._updated(changes)
                if _transport_settings(current) == _transport_settings(config):
                    self.config = current
                    self._retired.append(self._client)
                    self._client = client
                    break
                self._retired.append(client)
            config = current
        logger.debug("Rebuilt transport (gzip=%s, timeout=%ss)", current.gzip, current.timeout)

    def _build_transport(self, config: CouchConfig) -> httpx.Client:
        headers = {} if config.gzip else {"Accept-Encoding": "identity"}
        try:
            return httpx.Client(
                timeout=config.timeout,
                headers=headers,
                verify=config.verify_ssl,
                transport=self._transport,
            )
        except (OSError, ValueError) as e:
            raise TransportError(f"Cannot build HTTP client: {e}") from e

    # URI construction

    def _parse_base(self) -> httpx.URL:
        uri = self.config.uri
        try:
            url = httpx.URL(uri)
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(f"Invalid base URI {uri!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"Base URI must be an absolute http(s) URI: {uri!r}")
        return url

    def _resolve(self, path: str, params: QueryParams | None = None) -> httpx.URL:
        """Join a path onto the base URI and append query parameters.

        Parameters are added after any query already in ``path``; repeated
        keys are kept.

        Joining follows RFC 3986, so "_all_dbs" and "/_all_dbs" both land on
        the server root when the base has no path.
        """
        base = self._parse_base()
        try:
            url = base.join(path) if path else base
            if params:
                pairs = url.params.multi_items() + httpx.QueryParams(params).multi_items()
                url = url.copy_with(params=pairs)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise ConfigurationError(f"Cannot build URI from {base} and {path!r}: {e}") from e
        if not url.is_absolute_url:
            raise ConfigurationError(f"Joined URI is not absolute: {url}")
        return url

    def _db_path(self, name: str) -> str:
        return quote_name(self._effective_name(name))

    def _effective_name(self, name: str) -> str:
        return f"{self.config.db_prefix}{name}"

    # Request building

    def build_request(
        self,
        method: str,
        path: str,
        params: QueryParams | None = None,
        body: Any = None,
    ) -> httpx.Request:
        """Build an unsent request against the server.

        Args:
            method: HTTP method (e.g. "GET")
            path: Path relative to the base URI (e.g. "_all_dbs")
            params: Optional query parameters, a mapping or a sequence of
                pairs. Repeated keys are allowed; do not rely on ordering.
            body: Optional body. str/bytes are sent as is, anything else is
                serialized to JSON.

        Returns:
            Request carrying JSON content type and a Referer of its own URI

        Raises:
            ConfigurationError: If the base URI or joined URI is invalid.
        """
        url = self._resolve(path, params)
        headers = {
            "Content-Type": "application/json",
            "Referer": str(url),
        }
        return self.http_client.build_request(
            method, url, headers=headers, content=_encode_body(body)
        )

    def get(self, path: str, params: QueryParams | None = None) -> httpx.Request:
        return self.build_request("GET", path, params)

    def head(self, path: str, params: QueryParams | None = None) -> httpx.Request:
        return self.build_request("HEAD", path, params)

    def delete(self, path: str, params: QueryParams | None = None) -> httpx.Request:
        return self.build_request("DELETE", path, params)

    def post(self, path: str, body: Any) -> httpx.Request:
        return self.build_request("POST", path, body=body)

    def put(self, path: str, body: Any) -> httpx.Request:
        return self.build_request("PUT", path, body=body)

    # Execution

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send a built request through the current transport.

        Non-2xx statuses are returned, not raised.

        Raises:
            TransportError: On connection failure or timeout.
        """
        logger.debug("%s %s", request.method, request.url)
        try:
            return self.http_client.send(request)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout to {request.url}: {e}") from e
        except httpx.TransportError as e:
            raise TransportError(f"Cannot connect to {request.url}: {e}") from e

    def _decode(self, response: httpx.Response, adapter: TypeAdapter) -> Any:
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Response from {response.request.url} is not JSON", response.status_code
            ) from e
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected response from {response.request.url}: {e}", response.status_code
            ) from e

    # Server and database lifecycle

    def server_status(self) -> CouchStatus:
        """Fetch version and vendor info from the server root."""
        response = self.send(self.get(""))
        return self._decode(response, _status)

    def list_database_names(self) -> list[str]:
        """Names of all databases on the server, prefixed or not."""
        response = self.send(self.get("_all_dbs"))
        return self._decode(response, _db_names)

    def open_database(self, name: str) -> Database:
        """Open a database, creating it if it does not exist.

        The prefix is applied to ``name``. Existence is checked with HEAD;
        any status other than 200, including server errors, is taken to mean
        the database is missing and a create is attempted.

        Args:
            name: Database name without prefix

        Returns:
            Handle for the prefixed database

        Raises:
            TransportError: If the server cannot be reached.
            ServerError: If the fallback create is refused.
        """
        db = Database(self._effective_name(name), self)
        response = self.send(self.head(db.path))

        if response.status_code == httpx.codes.OK:
            return db
        if response.status_code != httpx.codes.NOT_FOUND:
            logger.warning(
                "HEAD %s returned %s, treating database %r as missing",
                response.request.url, response.status_code, db.name,
            )
        return self.create_database(name)

    def create_database(self, name: str) -> Database:
        """Create a database.

        Args:
            name: Database name without prefix

        Returns:
            Handle for the prefixed database

        Raises:
            ServerError: If the server does not answer ``ok: true``. The
                message is the server's reason, else its error, else
                "unspecified error".
        """
        db = Database(self._effective_name(name), self)
        response = self.send(self.put(db.path, None))
        envelope: CouchResponse = self._decode(response, _envelope)

        if envelope.ok is True:
            logger.debug("Created database %r", db.name)
            return db
        raise ServerError(envelope.reason or envelope.error)

    def destroy_database(self, name: str) -> bool:
        """Delete a database.

        Returns the envelope's ``ok``, False when the server left it out.
        A failure status is not raised as long as the body decodes.
        """
        response = self.send(self.delete(self._db_path(name)))
        envelope: CouchResponse = self._decode(response, _envelope)
        return envelope.ok or False
