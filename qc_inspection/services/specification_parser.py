"""
Specification Parser.

Single parser for the free-text specification field of a characteristic.
Two rules:

1. Tolerance:  "<value> ± <tolerance>" anywhere in the text, e.g. "155.5 ± 0.2".
   Fallback when there is no "±": whitespace-separated "<value> [<tolerance>]",
   e.g. "155.5 0.2" or "155.5" (tolerance 0).
2. Repeat:     "<count>x <tolerance-expr>" at the start, e.g. "2x 10.5 ± 0.2".

Parsing never raises. A tolerance whose value or tolerance is not a number
comes back with `valid == False`; callers treat that as a failed check.
"""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional


TOLERANCE_PATTERN = re.compile(r"([+-]?[0-9.]+)\s*±\s*([0-9.]+)")
REPEAT_PATTERN = re.compile(r"^(\d+)\s*[xX]\s*(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Tolerance:
    """Nominal value and symmetric tolerance. None marks an unparseable part."""
    value: Optional[Decimal]
    tolerance: Optional[Decimal]

    @property
    def valid(self) -> bool:
        return self.value is not None and self.tolerance is not None


@dataclass(frozen=True)
class RepeatTemplate:
    count: int
    specification: str


def parse_number(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a finite decimal number from text, or None.

    Decimal keeps boundary comparisons exact: 10.05 - 10.0 is exactly 0.05.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_tolerance(specification: Optional[str]) -> Tolerance:
    """Rule 1: value/tolerance, with the whitespace fallback."""
    specification = specification or ""
    match = TOLERANCE_PATTERN.search(specification)
    if match:
        return Tolerance(parse_number(match.group(1)), parse_number(match.group(2)))

    tokens = specification.split()
    if not tokens:
        return Tolerance(None, None)
    value = parse_number(tokens[0])
    tolerance = parse_number(tokens[1]) if len(tokens) > 1 else Decimal(0)
    return Tolerance(value, tolerance)


def parse_repeat(specification: Optional[str]) -> Optional[RepeatTemplate]:
    """Rule 2: leading repeat count. None when the text is not a repeat template."""
    match = REPEAT_PATTERN.match(specification or "")
    if not match:
        return None
    count = int(match.group(1))
    if count < 1:
        return None
    return RepeatTemplate(count=count, specification=match.group(2).strip())
