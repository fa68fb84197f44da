"""Listing pipeline: turns raw listing parameters into a RoleQuery.

Sort and search fields come from closed allow-lists that map wire names
(camelCase) to stored field names; unknown names never reach the store.
"""

from __future__ import annotations

import math

from roles_service.application.dtos.role import ListingParams
from roles_service.application.dtos.role_query import FieldPattern, RoleQuery
from roles_service.domain.enums import SortOrder
from roles_service.domain.exceptions import ValidationException
from roles_service.shared.utils.generators import is_valid_identifier

LIMIT_ALL = "all"

SORTABLE_FIELDS: dict[str, str] = {
    "id": "id",
    "roleName": "role_name",
    "tenantId": "tenant_id",
    "isActive": "is_active",
}
SEARCHABLE_FIELDS: tuple[str, ...] = ("role_name", "description")
SEARCHABLE_ID_FIELDS: tuple[str, ...] = ("id", "tenant_id")


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_positive_int(value: str | int, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationException(f"{field} must be a positive integer", field=field)
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationException(
            f"{field} must be a positive integer", field=field
        ) from None
    if number < 1:
        raise ValidationException(f"{field} must be a positive integer", field=field)
    return number


def parse_limit(value: str | int | None, default: int) -> int | None:
    """Return the page size, or None when the caller asked for all records."""
    if _is_blank(value):
        return default
    if isinstance(value, str) and value.strip().lower() == LIMIT_ALL:
        return None
    return _parse_positive_int(value, "limit")


def parse_order_type(value: str | int | None) -> SortOrder:
    if _is_blank(value):
        return SortOrder.ASCENDING
    try:
        return SortOrder(int(str(value).strip()))
    except ValueError:
        raise ValidationException(
            "orderType must be 1 (ascending) or -1 (descending)", field="orderType"
        ) from None


def build_search_patterns(search: str | None) -> tuple[FieldPattern, ...]:
    """OR-patterns for a free-text search; id fields join only for id-shaped input."""
    if _is_blank(search):
        return ()
    text = search.strip()
    patterns: list[FieldPattern] = []
    if is_valid_identifier(text):
        patterns.extend(FieldPattern.contains(f, text) for f in SEARCHABLE_ID_FIELDS)
    patterns.extend(FieldPattern.contains(f, text) for f in SEARCHABLE_FIELDS)
    return tuple(patterns)


def build_role_query(params: ListingParams, default_limit: int = 10) -> RoleQuery:
    """Build the filter, sort and pagination query for a role listing.

    Raises:
        ValidationException: If orderType, pageNo or limit is malformed.
    """
    page = 1 if _is_blank(params.page_no) else _parse_positive_int(params.page_no, "pageNo")
    limit = parse_limit(params.limit, default_limit)
    sort_order = parse_order_type(params.order_type)

    sort_field = SORTABLE_FIELDS.get(params.order_by or "")
    if sort_field is None:
        sort_kwargs = {}
    else:
        sort_kwargs = {"sort_field": sort_field, "sort_order": sort_order, "collate": True}

    return RoleQuery(
        any_of=build_search_patterns(params.search),
        skip=(page - 1) * limit if limit is not None else 0,
        limit=limit,
        page=page,
        **sort_kwargs,
    )


def last_page(total: int, limit: int | None) -> int:
    """Number of pages for total records; an unbounded limit is one page of everything."""
    effective_limit = total if limit is None else limit
    if effective_limit <= 0:
        return 0
    return math.ceil(total / effective_limit)
