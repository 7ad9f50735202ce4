"""
Compliance aggregation.

Folds an unbounded report history into one status per part per calendar
month over a fixed trailing window, for the consumer-facing compliance
report.

Bucketing rules:
- Months are the N most recent calendar months ending at the current month,
  oldest first, labelled "Mon YYYY". They do not depend on the data.
- Every (partNo, month) cell starts as "No data".
- A bucket shows the status of its latest-submitted report. Identical
  timestamps are resolved by the greater report id.
- Reports without a submission date, or for a partNo outside the part set,
  are skipped.
"""
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from qc_inspection.config import settings
from qc_inspection.models.inspection import (
    NO_DATA, NOT_AVAILABLE, Role, STATUS_ABBREVIATIONS, STATUS_LEGEND,
)
from qc_inspection.schemas.part import Part, PartSummary
from qc_inspection.schemas.report import Report
from qc_inspection.schemas.reporting import ComplianceGrid, ComplianceReport
from qc_inspection.schemas.user import User


logger = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


# ============================================================================
# MONTH WINDOW
# ============================================================================

def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def trailing_months(today: Optional[date] = None, window: Optional[int] = None) -> List[str]:
    """Labels of the `window` most recent months ending at today's month, oldest first."""
    today = today or date.today()
    window = window or settings.COMPLIANCE_WINDOW_MONTHS
    current = today.year * 12 + (today.month - 1)
    labels = []
    for offset in range(window - 1, -1, -1):
        year, month_index = divmod(current - offset, 12)
        labels.append(month_label(year, month_index + 1))
    return labels


def _as_local_naive(moment: datetime) -> datetime:
    """Aware timestamps are bucketed in local time so they compare with naive ones."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def report_month(report: Report) -> Optional[str]:
    if report.submission_date is None:
        return None
    moment = _as_local_naive(report.submission_date)
    return month_label(moment.year, moment.month)


# ============================================================================
# AGGREGATION
# ============================================================================

def filter_parts(parts: Iterable[Part], customer: Optional[str] = None) -> List[Part]:
    """Parts of one customer, or all parts when no customer is selected."""
    if not customer:
        return list(parts)
    return [part for part in parts if part.customer == customer]


def list_customers(parts: Iterable[Part]) -> List[str]:
    """Distinct customers in first-seen order."""
    customers: List[str] = []
    for part in parts:
        if part.customer and part.customer not in customers:
            customers.append(part.customer)
    return customers


def _bucket_key(report: Report) -> Tuple[datetime, str]:
    return _as_local_naive(report.submission_date), report.id


def aggregate(
    reports: Sequence[Report],
    parts: Sequence[Part],
    customer: Optional[str] = None,
    today: Optional[date] = None,
    window: Optional[int] = None,
) -> ComplianceGrid:
    """
    Build the part x month status grid.

    Args:
        reports: Report snapshot (any order)
        parts: Part snapshot
        customer: Optional customer filter
        today: Reference day for the month window (defaults to today)
        window: Number of months (defaults to COMPLIANCE_WINDOW_MONTHS)

    Returns:
        ComplianceGrid with months, grid and the filtered part list
    """
    months = trailing_months(today, window)
    selected = filter_parts(parts, customer)

    grid: Dict[str, Dict[str, str]] = {
        part.part_no: {month: NO_DATA for month in months} for part in selected
    }

    latest: Dict[Tuple[str, str], Report] = {}
    skipped = 0
    for report in reports:
        month = report_month(report)
        if month is None or report.part_no not in grid:
            skipped += 1
            continue
        if month not in grid[report.part_no]:
            continue
        key = (report.part_no, month)
        current = latest.get(key)
        if current is None or _bucket_key(report) > _bucket_key(current):
            latest[key] = report

    for (part_no, month), report in latest.items():
        grid[part_no][month] = report.status

    if skipped:
        logger.debug(f"Compliance aggregation skipped {skipped} report(s) without a part or submission date")

    return ComplianceGrid(
        months=months,
        grid=grid,
        parts=[
            PartSummary(id=part.id, part_no=part.part_no, part_name=part.part_name, customer=part.customer)
            for part in selected
        ],
    )


# ============================================================================
# CONSUMER REPORT
# ============================================================================

def status_abbreviation(status: str) -> str:
    """One-letter legend code; unknown statuses render blank."""
    return STATUS_ABBREVIATIONS.get(status, "")


def role_signatories(users: Iterable[User]) -> Dict[str, str]:
    """Email of the first user holding each role, or "N/A"."""
    signatories = {role.value: NOT_AVAILABLE for role in Role}
    for user in users:
        role = user.role_enum
        if role is not None and signatories[role.value] == NOT_AVAILABLE:
            signatories[role.value] = user.email or NOT_AVAILABLE
    return signatories


def build_compliance_report(
    reports: Sequence[Report],
    parts: Sequence[Part],
    users: Sequence[User],
    customer: Optional[str] = None,
    today: Optional[date] = None,
) -> ComplianceReport:
    """Grid plus customer list, legend codes and signatories for rendering."""
    result = aggregate(reports, parts, customer=customer, today=today)
    return ComplianceReport(
        months=result.months,
        grid=result.grid,
        parts=result.parts,
        customer=customer or "",
        customers=list_customers(parts),
        abbreviations={
            part_no: {month: status_abbreviation(status) for month, status in row.items()}
            for part_no, row in result.grid.items()
        },
        legend=dict(STATUS_LEGEND),
        signatories=role_signatories(users),
    )
