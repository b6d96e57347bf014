"""Configuration for the CouchDB client."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CouchConfig(BaseSettings):
    """Connection configuration for a CouchDB server.

    All settings can be configured via environment variables with COUCH_ prefix.

    Settings:
        - COUCH_URI: Base URI of the server (e.g. http://localhost:5984)
        - COUCH_DB_PREFIX: String prepended to every database name
        - COUCH_GZIP: Ask the server for compressed responses
        - COUCH_TIMEOUT: Per-request timeout in whole seconds
        - COUCH_VERIFY_SSL: Verify TLS certificates for https URIs

    The config is plain value data. ``CouchClient`` keeps its own copy, so
    changing a config after handing it to a client has no effect on that
    client. Assignments are validated like construction.
    """

    model_config = SettingsConfigDict(
        env_prefix="COUCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    uri: str = Field(
        default="http://localhost:5984",
        validation_alias=AliasChoices("uri", "COUCH_URI", "COUCH_URL"),
    )
    db_prefix: str = Field(
        default="",
        description="Prefix prepended to database names",
    )
    gzip: bool = Field(
        default=True,
        description="Accept gzip/deflate compressed responses",
    )
    timeout: int = Field(default=4, ge=1, le=255)
    verify_ssl: bool = Field(default=True)

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        """Validate the base URI is an absolute http(s) URI."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URI must start with http:// or https://")
        if not v.split("://", 1)[1].split("/", 1)[0]:
            raise ValueError(f"URI has no host: {v}")
        return v
