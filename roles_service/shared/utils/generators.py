"""ID generators and identifier format checks (CUID2)."""

import re

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# CUID2 ids from this service, or 24-hex object ids issued by peer services.
_IDENTIFIER_PATTERN = re.compile(r"^(?:[a-z][0-9a-z]{23}|[0-9a-f]{24})$")


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def is_valid_identifier(value: str) -> bool:
    """Return True if value has the shape of a role, tenant or permission id."""
    return bool(_IDENTIFIER_PATTERN.match(value.strip().lower()))
