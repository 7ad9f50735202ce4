"""
Inspection Domain Models - Roles, report statuses and fixed tables.

This module holds the vocabulary shared by every inspection component:
- Role: the four-step sign-off escalation chain
- ReportStatus: the report lifecycle
- ReviewAction: what a reviewer can do to a report
- SIGNATURE_FIELDS: explicit role -> stored signature field mapping

Values are the human-readable strings kept in the document store, so stored
documents round-trip without translation.
"""
from enum import Enum
from typing import Dict


# Number of observation slots per characteristic on every report.
OBSERVATION_SLOTS = 6

# Aggregation and export sentinels
NO_DATA = "No data"
PENDING_SIGNATURE = "Pending"
NO_REMARKS = "No remarks."
NOT_AVAILABLE = "N/A"

PASS_LABEL = "OK"
FAIL_LABEL = "NOT OK"


# ============================================================================
# ENUMS
# ============================================================================

class Role(str, Enum):
    """Sign-off roles, in escalation order."""
    AUDITOR = "Auditor"                         # Creates and submits reports
    TEAM_LEADER_AUDIT = "Team Leader Audit"     # First review
    HOF_AUDIT = "H.O.F. Audit"                  # Head of function review
    QUALITY_HEAD = "Quality Head"               # Final approval, administration


class ReportStatus(str, Enum):
    """Lifecycle status of an inspection report."""
    SUBMITTED = "Submitted"
    REVIEWED_BY_TEAM_LEADER = "Reviewed by Team Leader Audit"
    REVIEWED_BY_HOF = "Reviewed by H.O.F. Audit"
    APPROVED = "Approved"                       # Terminal
    RESCHEDULING = "Re-scheduling"              # Terminal (rejected)


class ReviewAction(str, Enum):
    """Reviewer decision on a report."""
    APPROVE = "APPROVE"
    REJECT = "REJECT"


# ============================================================================
# FIXED TABLES
# ============================================================================

# Stored signature field per role. The Auditor's signature is the report's
# submittedBy field; the auditorSignature entry is kept for completeness.
SIGNATURE_FIELDS: Dict[Role, str] = {
    Role.AUDITOR: "auditorSignature",
    Role.TEAM_LEADER_AUDIT: "teamleaderauditSignature",
    Role.HOF_AUDIT: "hofauditSignature",
    Role.QUALITY_HEAD: "qualityheadSignature",
}

# One-letter legend used by the compliance grid renderer.
STATUS_ABBREVIATIONS: Dict[str, str] = {
    ReportStatus.APPROVED.value: "A",
    ReportStatus.RESCHEDULING.value: "R",
    ReportStatus.SUBMITTED.value: "S",
    ReportStatus.REVIEWED_BY_TEAM_LEADER.value: "P",
    ReportStatus.REVIEWED_BY_HOF.value: "P",
    NO_DATA: "N",
}

STATUS_LEGEND: Dict[str, str] = {
    "A": "Approved",
    "R": "Re-scheduling",
    "S": "Submitted",
    "P": "In review",
    "N": NO_DATA,
}
