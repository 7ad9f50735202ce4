"""
Enum Utilities for String-valued Role and Status Fields

STORAGE STANDARD:
━━━━━━━━━━━━━━━━━
• Document store: plain strings, human-readable ("H.O.F. Audit", "Re-scheduling")
• Python: str-based Enum for validation and exhaustive tables
• Export/display: use the string directly (it is already the label)

DATA FLOW:
━━━━━━━━━━
INPUT (stored document):
    String → to_enum() → Enum (or None when the value is unknown)
    Example: "Reviewed by H.O.F. Audit" → ReportStatus.REVIEWED_BY_HOF

OUTPUT (partial update / export):
    Enum → get_enum_value() → String
    Example: Role.QUALITY_HEAD → "Quality Head"

Unknown strings never raise here; callers decide whether an unknown value is
an InvalidState (workflow) or a sentinel (aggregation/export).
"""

from enum import Enum
from typing import Any, Optional, TypeVar, Type


T = TypeVar('T', bound=Enum)


def get_enum_value(value: Any) -> Optional[str]:
    """
    Safely get string value from an enum or string.

    Examples:
        >>> get_enum_value(Role.AUDITOR)
        'Auditor'
        >>> get_enum_value("Auditor")
        'Auditor'
        >>> get_enum_value(None)
        None
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    return str(value)


def to_enum(value: Any, enum_class: Type[T]) -> Optional[T]:
    """
    Convert a stored string value to an enum instance.

    Returns:
        Enum instance or None if not found

    Examples:
        >>> to_enum("Approved", ReportStatus)
        ReportStatus.APPROVED
        >>> to_enum("Archived", ReportStatus)
        None
    """
    if value is None:
        return None
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except (ValueError, KeyError):
        return None

