"""
DevCamper API — Shared Schema Building Blocks
==============================================

What:  Base classes, the sanitized string type, and envelope models used by
       every resource schema.
Why:   The API speaks camelCase JSON while the ORM uses snake_case columns;
       these bases put that mapping in one place.

Conventions:
    RequestSchema   accepts camelCase or snake_case keys; unknown keys are ignored.
    ResponseSchema  reads ORM objects (from_attributes) and serializes with
                    camelCase keys via `to_dict()`.
    CleanStr        a str with HTML stripped by `sanitize()`; used for every
                    free-text input field (never for passwords or emails).
"""

import uuid
from typing import Annotated, Any, Dict, Iterable, List, Optional

import nh3
from pydantic import AfterValidator, AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def sanitize(value: str) -> str:
    """
    Strip markup from user-supplied text.

    All tags are removed (their text content is kept), the bodies of
    <script> and <style> are dropped entirely, and the result is trimmed.
    """
    return nh3.clean(value, tags=set(), clean_content_tags={"script", "style"}).strip()


CleanStr = Annotated[str, AfterValidator(sanitize)]


class RequestSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ResponseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )

    def to_dict(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        JSON-ready dict with public (camelCase) keys.

        `fields` is a projection over the public keys; `id` is always kept.
        """
        data = self.model_dump(mode="json", by_alias=True)
        if fields:
            keep = set(fields) | {"id"}
            data = {key: value for key, value in data.items() if key in keep}
        return data


def public_field_map(schema: type[BaseModel], extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Map public (camelCase) field names to attribute names for `schema`.

    Both spellings are accepted as keys so `averageCost` and `average_cost`
    filter the same column. `extra` adds names that don't appear on the
    schema itself, e.g. dotted `location.city`.
    """
    mapping: Dict[str, str] = {}
    for name, field in schema.model_fields.items():
        if field.exclude:
            continue
        public = field.serialization_alias or to_camel(name)
        mapping[public] = name
        mapping[name] = name
    if extra:
        mapping.update(extra)
    return mapping


class BootcampSummary(ResponseSchema):
    """The `{id, name, description}` view embedded in courses and reviews."""

    id: uuid.UUID
    name: str
    description: str


class PageLink(BaseModel):
    page: int
    limit: int


class Pagination(BaseModel):
    next: Optional[PageLink] = None
    prev: Optional[PageLink] = None


class ListEnvelope(BaseModel):
    """Shape of every advanced-results response (documentation model)."""

    success: bool = True
    count: int
    pagination: Pagination = Field(default_factory=Pagination)
    data: List[Dict[str, Any]]


class ErrorResponse(BaseModel):
    """
    Error envelope returned by every global exception handler.

    Example:
        {"success": false, "error": "Not authorized to access this route", "request_id": "a1b2c3d4"}
    """

    success: bool = False
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
