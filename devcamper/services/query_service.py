"""
DevCamper API — Advanced Results (List Query Translator)
=========================================================

What:  Turns a list endpoint's query string into a filtered, sorted,
       projected and paginated SELECT, and wraps the rows in the
       `{success, count, pagination, data}` envelope.
Why:   Every collection endpoint (bootcamps, courses, reviews, users)
       supports the same query language; one translator keeps them identical.
How:   `parse_list_query()` is pure: it validates the parameters against the
       resource's public field map and produces SQLAlchemy clauses.
       `AdvancedResults` is a FastAPI dependency that runs the query and a
       separate count query on the request's session.

Query Language:
    ?averageCost[lte]=10000        comparison (gt, gte, lt, lte)
    ?careers[in]=Business,Other    membership, comma-separated
    ?housing=true                  equality
    ?location.state=MA             dotted names address the location columns
    ?select=name,description       projection (id is always returned)
    ?sort=-averageCost,name        leading '-' sorts descending
    ?page=2&limit=10               1-based page, default 1 / 25
                                   (limit is capped at 100; a page past the
                                   last row returns no data)

    For list-valued columns (careers) equality means "contains".
    Unknown fields, unknown operators and values that don't fit the column
    type are rejected with a 400.

Envelope:
    count       total rows matching the filters, ignoring pagination
    pagination  {"next": {...}} iff page*limit < count,
                {"prev": {...}} iff page > 1, otherwise {}
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from fastapi import Depends, Request
from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Uuid, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from devcamper.database import get_db_session
from devcamper.exceptions import ValidationError
from devcamper.schemas.common import ResponseSchema, sanitize

logger = logging.getLogger(__name__)

RESERVED_PARAMS = {"select", "sort", "page", "limit"}
OPERATORS = {"gt", "gte", "lt", "lte", "in"}
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
MAX_LIMIT = 100
DEFAULT_SORT = "-createdAt"

_FILTER_KEY = re.compile(r"^(?P<field>[A-Za-z_][A-Za-z0-9_.]*)(\[(?P<op>[A-Za-z]+)\])?$")


@dataclass
class ListQuery:
    """Validated list parameters, ready to apply to a SELECT."""

    conditions: List[Any] = field(default_factory=list)
    order_by: List[Any] = field(default_factory=list)
    fields: Optional[List[str]] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ── Parsing ──────────────────────────────────────────────────────────────────

def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _public_name(field_map: Mapping[str, str], name: str) -> str:
    """Response key that `select` must keep for `name`; 400 for unknown names."""
    if name == "id":
        return name
    if name not in field_map:
        raise ValidationError(message=f"Invalid select field '{name}'", field="select")
    if "." in name:
        return name.split(".", 1)[0]
    attr = field_map[name]
    for key, value in field_map.items():
        if value == attr and key != attr:
            return key
    return attr


def _resolve_column(model: Any, field_map: Mapping[str, str], name: str):
    attr = field_map.get(name)
    if attr is None or attr not in model.__table__.columns:
        return None
    return model.__table__.columns[attr]


def _coerce(column, name: str, raw: str) -> Any:
    """Convert a query-string value to the Python type of `column`."""
    column_type = column.type
    try:
        if isinstance(column_type, Boolean):
            lowered = raw.strip().lower()
            if lowered in ("true", "1"):
                return True
            if lowered in ("false", "0"):
                return False
            raise ValueError(raw)
        if isinstance(column_type, Integer):
            return int(raw)
        if isinstance(column_type, Float):
            return float(raw)
        if isinstance(column_type, DateTime):
            return datetime.fromisoformat(raw)
        if isinstance(column_type, Uuid):
            return uuid.UUID(raw)
    except ValueError:
        raise ValidationError(
            message=f"Invalid value '{raw}' for field '{name}'",
            field=name,
        )
    return sanitize(raw)


def _json_contains(attr, value: str):
    # JSON arrays are stored as text like ["Business", "Other"]
    return cast(attr, String).like(f'%"{_escape_like(value)}"%', escape="\\")


def _condition(model: Any, column, name: str, op: Optional[str], raw: str):
    attr = getattr(model, column.key)
    is_list = isinstance(column.type, JSON)

    if op == "in":
        values = [_coerce(column, name, part) for part in raw.split(",") if part != ""]
        if is_list:
            return or_(*[_json_contains(attr, value) for value in values])
        return attr.in_(values)

    value = _coerce(column, name, raw)
    if op is None:
        return _json_contains(attr, value) if is_list else attr == value
    if is_list:
        raise ValidationError(
            message=f"Operator '{op}' is not supported for field '{name}'",
            field=name,
        )
    return {
        "gt": attr > value,
        "gte": attr >= value,
        "lt": attr < value,
        "lte": attr <= value,
    }[op]


def parse_list_query(
    params: Iterable[Tuple[str, str]],
    model: Any,
    field_map: Mapping[str, str],
) -> ListQuery:
    """
    Validate list parameters against `field_map` and build the query clauses.

    Args:
        params:    (key, value) pairs from the query string, repeats allowed
        model:     ORM model being listed
        field_map: public name → attribute name (see `public_field_map`)

    Raises:
        ValidationError: unknown field or operator, or a value that can't be
                         coerced to the column type
    """
    query = ListQuery()
    reserved: Dict[str, str] = {}

    for key, raw in params:
        if key in RESERVED_PARAMS:
            reserved[key] = raw
            continue

        match = _FILTER_KEY.match(key)
        if match is None:
            raise ValidationError(message=f"Invalid filter '{key}'", field=key)
        name, op = match.group("field"), match.group("op")
        if op is not None and op not in OPERATORS:
            raise ValidationError(message=f"Invalid filter operator '{op}'", field=name)

        column = _resolve_column(model, field_map, name)
        if column is None:
            raise ValidationError(message=f"Invalid filter field '{name}'", field=name)
        query.conditions.append(_condition(model, column, name, op, raw))

    if reserved.get("select"):
        query.fields = [
            _public_name(field_map, name.strip())
            for name in reserved["select"].split(",")
            if name.strip()
        ]

    for token in (reserved.get("sort") or DEFAULT_SORT).split(","):
        token = token.strip()
        if not token:
            continue
        descending = token.startswith("-")
        name = token.lstrip("-")
        column = _resolve_column(model, field_map, name)
        if column is None or isinstance(column.type, JSON):
            raise ValidationError(message=f"Invalid sort field '{name}'", field="sort")
        attr = getattr(model, column.key)
        query.order_by.append(attr.desc() if descending else attr.asc())
    # Stable paging when the sort key has ties
    query.order_by.append(model.id.asc())

    query.page = _positive_int(reserved.get("page"), DEFAULT_PAGE)
    query.limit = min(_positive_int(reserved.get("limit"), DEFAULT_LIMIT), MAX_LIMIT)
    return query


def build_pagination(page: int, limit: int, total: int) -> Dict[str, Dict[str, int]]:
    pagination: Dict[str, Dict[str, int]] = {}
    if page * limit < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if page > 1:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return pagination


# ── Execution ────────────────────────────────────────────────────────────────

async def run_list_query(
    db: AsyncSession,
    model: Any,
    schema: type[ResponseSchema],
    query: ListQuery,
    populate: Optional[str] = None,
) -> Dict[str, Any]:
    """Execute `query` and return the advanced-results envelope."""
    total = await db.scalar(
        select(func.count()).select_from(model).where(*query.conditions)
    ) or 0

    rows: List[Any] = []
    # A page past the last row never reaches the database; its OFFSET may not
    # even fit in a BIGINT
    if query.offset < total:
        stmt = (
            select(model)
            .where(*query.conditions)
            .order_by(*query.order_by)
            .offset(query.offset)
            .limit(query.limit)
        )
        if populate:
            stmt = stmt.options(selectinload(getattr(model, populate)))
        rows = list((await db.scalars(stmt)).all())

    logger.debug(
        "List %s: %d of %d rows (page=%d, limit=%d)",
        model.__tablename__, len(rows), total, query.page, query.limit,
    )
    return {
        "success": True,
        "count": total,
        "pagination": build_pagination(query.page, query.limit, total),
        "data": [schema.model_validate(row).to_dict(query.fields) for row in rows],
    }


class AdvancedResults:
    """
    FastAPI dependency producing the list envelope for one resource.

    Usage:
        bootcamp_results = AdvancedResults(Bootcamp, BootcampWithCourses,
                                           BOOTCAMP_FIELDS, populate="courses")

        @router.get("")
        async def list_bootcamps(results: dict = Depends(bootcamp_results)):
            return results
    """

    def __init__(
        self,
        model: Any,
        schema: type[ResponseSchema],
        field_map: Mapping[str, str],
        populate: Optional[str] = None,
    ):
        self.model = model
        self.schema = schema
        self.field_map = field_map
        self.populate = populate

    async def __call__(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_session),
    ) -> Dict[str, Any]:
        query = parse_list_query(request.query_params.multi_items(), self.model, self.field_map)
        return await run_list_query(db, self.model, self.schema, query, self.populate)
