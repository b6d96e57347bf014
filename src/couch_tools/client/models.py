"""Typed structures for CouchDB JSON responses.

Every server-optional field is ``None`` when absent; absent and explicit
``null`` decode the same way. Unknown keys are ignored. Field names follow
Python conventions and the wire names are kept as aliases, so dump with
``by_alias=True`` to get the JSON the server speaks.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

SortDirection = Literal["asc", "desc"]

# "year" or {"year": "desc"}
SortSpec = Union[str, dict[str, SortDirection]]


class CouchModel(BaseModel):
    """Base for all response models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CouchVendor(CouchModel):
    """Server vendor info."""

    name: str
    version: str


class CouchStatus(CouchModel):
    """Response of ``GET /`` on the server root."""

    couch_version: str = Field(alias="couchdb")
    instance_uuid: str = Field(alias="uuid")
    api_version: str = Field(alias="version")
    vendor: CouchVendor


class CouchResponse(CouchModel):
    """Envelope returned by mutating calls.

    ``ok`` absent or false, usually with ``error``/``reason`` set, means the
    operation failed.
    """

    ok: bool | None = None
    error: str | None = None
    reason: str | None = None


class IndexFields(CouchModel):
    """The ``def`` part of an index: its ordered sort fields."""

    fields: list[SortSpec]

    @classmethod
    def new(cls, fields: list[SortSpec]) -> "IndexFields":
        return cls(fields=list(fields))


class Index(CouchModel):
    """Secondary index definition."""

    ddoc: str | None = None
    name: str
    index_type: str = Field(alias="type")
    definition: IndexFields = Field(alias="def")


class IndexCreated(CouchModel):
    """Response of an index creation."""

    result: str | None = None
    id: str | None = None
    name: str | None = None
    error: str | None = None
    reason: str | None = None


class DatabaseIndexList(CouchModel):
    """Indexes defined on a database."""

    total_rows: int
    indexes: list[Index]


class DesignCreated(CouchModel):
    """Response of a design document creation."""

    result: str | None = None
    id: str | None = None
    name: str | None = None
    error: str | None = None
    reason: str | None = None
