"""Shared utilities: datetime helpers and id generators."""

from roles_service.shared.utils.datetime import ensure_utc, format_in_timezone, utc_now
from roles_service.shared.utils.generators import generate_cuid, is_valid_identifier

__all__ = [
    "ensure_utc",
    "format_in_timezone",
    "generate_cuid",
    "is_valid_identifier",
    "utc_now",
]
