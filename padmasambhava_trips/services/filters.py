"""
Query-string helpers shared by the admin listing endpoints.
"""

from enum import Enum
from typing import Optional, Type, TypeVar

from ..utils.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

# Values of the ``status`` query parameter that mean "no filter"
NO_STATUS_FILTER = {"", "all"}


def parse_status_filter(raw: Optional[str], enum_cls: Type[E]) -> Optional[E]:
    """
    Turn a ``status`` query parameter into an enum member.

    Raises:
        ValidationError: When the value names no known status
    """
    if raw is None or raw.strip().lower() in NO_STATUS_FILTER:
        return None

    value = raw.strip()
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError.from_field_errors(
            {"status": [f"'{value}' is not a valid status; expected one of: {allowed}"]}
        )


def escape_like(term: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )
