"""Domain enumerations for the Roles service.

Enums represent fixed sets of domain values (e.g. uniqueness rule, sort order).
"""

from enum import Enum


class RoleNameMatch(str, Enum):
    """How a candidate role name is compared against existing names.

    PREFIX flags any existing name that starts with the candidate
    (case-insensitive); EXACT flags only case-insensitive equality.
    """

    PREFIX = "prefix"
    EXACT = "exact"


class SortOrder(int, Enum):
    """Listing sort direction as sent on the wire (orderType)."""

    ASCENDING = 1
    DESCENDING = -1
