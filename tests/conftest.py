"""
Pytest configuration and fixtures for the inspection sign-off test suite.
"""

from datetime import datetime
from typing import Dict

import pytest

from qc_inspection.models.inspection import ReportStatus, Role
from qc_inspection.schemas.part import Part
from qc_inspection.schemas.report import Characteristic, Report, ReviewConfirmation
from qc_inspection.schemas.user import User
from qc_inspection.store import InMemoryDocumentStore, PARTS, USERS


# ============================================================================
# Users
# ============================================================================

USER_DOCUMENTS: Dict[str, dict] = {
    "u-auditor": {"email": "auditor@example.com", "role": Role.AUDITOR.value},
    "u-auditor-2": {"email": "second.auditor@example.com", "role": Role.AUDITOR.value},
    "u-tla": {"email": "tla@example.com", "role": Role.TEAM_LEADER_AUDIT.value},
    "u-hof": {"email": "hof@example.com", "role": Role.HOF_AUDIT.value},
    "u-qh": {"email": "qh@example.com", "role": Role.QUALITY_HEAD.value},
}


def make_user(user_id: str) -> User:
    return User(id=user_id, **USER_DOCUMENTS[user_id])


@pytest.fixture
def auditor():
    return make_user("u-auditor")


@pytest.fixture
def second_auditor():
    return make_user("u-auditor-2")


@pytest.fixture
def team_leader():
    return make_user("u-tla")


@pytest.fixture
def hof():
    return make_user("u-hof")


@pytest.fixture
def quality_head():
    return make_user("u-qh")


@pytest.fixture
def reviewers(team_leader, hof, quality_head):
    """Reviewer for each non-terminal status."""
    return {
        ReportStatus.SUBMITTED: team_leader,
        ReportStatus.REVIEWED_BY_TEAM_LEADER: hof,
        ReportStatus.REVIEWED_BY_HOF: quality_head,
    }


@pytest.fixture
def users_by_role(auditor, team_leader, hof, quality_head):
    return {
        Role.AUDITOR: auditor,
        Role.TEAM_LEADER_AUDIT: team_leader,
        Role.HOF_AUDIT: hof,
        Role.QUALITY_HEAD: quality_head,
    }


@pytest.fixture
def all_users():
    return [make_user(user_id) for user_id in USER_DOCUMENTS]


# ============================================================================
# Parts
# ============================================================================

BRACKET_DOCUMENT = {
    "partNo": "P-100",
    "partName": "Mounting Bracket",
    "customer": "Acme",
    "characteristics": [
        {"name": "Hole Diameter", "specification": "3x 5.0 ± 0.1", "checkMethod": "Pin gauge"},
        {"name": "Length", "specification": "155.5 ± 0.2", "checkMethod": "Height gauge"},
    ],
}

HOUSING_DOCUMENT = {
    "partNo": "P-200",
    "partName": "Pump Housing",
    "customer": "Globex",
    "characteristics": [
        {"name": "Bore", "specification": "42.0 ± 0.05", "checkMethod": "Bore gauge"},
    ],
}


@pytest.fixture
def bracket():
    return Part.model_validate({"id": "part-bracket", **BRACKET_DOCUMENT})


@pytest.fixture
def housing():
    return Part.model_validate({"id": "part-housing", **HOUSING_DOCUMENT})


# ============================================================================
# Reports
# ============================================================================

@pytest.fixture
def make_report():
    """Factory for stored reports."""
    def _make_report(
        report_id: str = "P-100-1767225600000",
        status: ReportStatus = ReportStatus.SUBMITTED,
        part_no: str = "P-100",
        submission_date: datetime = datetime(2026, 3, 5, 14, 7, 9),
        submitted_by: str = "u-auditor",
        remarks: str = "Measured on CMM 2.",
        **fields,
    ) -> Report:
        return Report(
            id=report_id,
            part_no=part_no,
            part_name="Mounting Bracket",
            customer="Acme",
            characteristics=[
                Characteristic(
                    name="Length",
                    specification="155.5 ± 0.2",
                    check_method="Height gauge",
                    observations=["155.4", "155.6", "", "", "", ""],
                ),
            ],
            remarks=remarks,
            status=status.value if isinstance(status, ReportStatus) else status,
            submitted_by=submitted_by,
            submission_date=submission_date,
            **fields,
        )
    return _make_report


@pytest.fixture
def confirmation():
    return ReviewConfirmation(reviewed_confirmed=True, signature="J. Reviewer")


# ============================================================================
# Store
# ============================================================================

@pytest.fixture
def store():
    """Document store seeded with the test users and both parts."""
    return InMemoryDocumentStore(seed={
        USERS: dict(USER_DOCUMENTS),
        PARTS: {"part-bracket": BRACKET_DOCUMENT, "part-housing": HOUSING_DOCUMENT},
    })

