"""
Tolerance evaluation.

The only place an observation is judged against a specification. Row badges,
review screens and log-sheet export all call into here so they always agree.
"""
from typing import Iterable, Optional

from qc_inspection.models.inspection import PASS_LABEL, FAIL_LABEL
from qc_inspection.services.specification_parser import parse_number, parse_tolerance


def evaluate(observation: Optional[str], specification: Optional[str]) -> bool:
    """
    Decide whether one observation passes a specification.

    - Empty observation passes (not measured yet is not a failure)
    - Unparseable value, tolerance or observation fails
    - Otherwise passes iff |observation - value| <= tolerance

    Examples:
        >>> evaluate("10.05", "10.0 ± 0.05")
        True
        >>> evaluate("abc", "10.0 ± 0.05")
        False
    """
    if observation is None or observation == "":
        return True

    tolerance = parse_tolerance(specification)
    measured = parse_number(observation)
    if not tolerance.valid or measured is None:
        return False

    return abs(measured - tolerance.value) <= tolerance.tolerance


def all_observations_pass(observations: Iterable[Optional[str]], specification: Optional[str]) -> bool:
    """True when every observation of a characteristic passes."""
    return all(evaluate(obs, specification) for obs in observations)


def pass_fail_label(observations: Iterable[Optional[str]], specification: Optional[str]) -> str:
    """"OK" / "NOT OK" badge for a characteristic row."""
    return PASS_LABEL if all_observations_pass(observations, specification) else FAIL_LABEL
