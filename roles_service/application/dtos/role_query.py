"""Immutable role query specification (filter, sort, pagination).

Built by the listing pipeline and the uniqueness probe; executed by the
store adapter. Field names here are stored field names, never wire names.
"""

import re
from dataclasses import dataclass

from roles_service.domain.enums import SortOrder

DEFAULT_SORT_FIELD = "created_at"


@dataclass(frozen=True)
class FieldPattern:
    """Case-insensitive pattern applied to one stored field ("id" is the document id)."""

    field: str
    pattern: re.Pattern[str]

    @classmethod
    def contains(cls, field: str, text: str) -> "FieldPattern":
        """Literal, case-insensitive substring match."""
        return cls(field, re.compile(re.escape(text), re.IGNORECASE))

    @classmethod
    def starts_with(cls, field: str, text: str) -> "FieldPattern":
        """Literal, case-insensitive prefix match."""
        return cls(field, re.compile("^" + re.escape(text), re.IGNORECASE))

    @classmethod
    def equals(cls, field: str, text: str) -> "FieldPattern":
        """Literal, case-insensitive full match."""
        return cls(field, re.compile("^" + re.escape(text) + "$", re.IGNORECASE))


@dataclass(frozen=True)
class RoleQuery:
    """What to fetch from the roles collection.

    any_of patterns are OR-ed (empty means no restriction), all_of patterns
    are AND-ed, exclude_ids removes documents by id. The soft-delete
    predicate is never part of a query; the store always adds it.
    """

    any_of: tuple[FieldPattern, ...] = ()
    all_of: tuple[FieldPattern, ...] = ()
    exclude_ids: frozenset[str] = frozenset()
    sort_field: str = DEFAULT_SORT_FIELD
    sort_order: SortOrder = SortOrder.ASCENDING
    collate: bool = False
    skip: int = 0
    limit: int | None = None
    page: int = 1

    @property
    def is_paginated(self) -> bool:
        return self.limit is not None
