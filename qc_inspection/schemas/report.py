"""
Inspection Report Schemas.

Pydantic schemas for inspection reports including:
- Characteristics with their six observation slots
- Report drafts (blank forms built from a part) and submissions
- Stored reports, with one signature field per reviewing role
- Review requests and the partial update a review produces
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from qc_inspection.core.enum_utils import get_enum_value, to_enum
from qc_inspection.models.inspection import (
    OBSERVATION_SLOTS, Role, ReportStatus, ReviewAction, SIGNATURE_FIELDS,
)
from qc_inspection.schemas.base import DocumentSchema, BaseCreateSchema


def blank_observations() -> List[str]:
    return [""] * OBSERVATION_SLOTS


# ============================================================================
# CHARACTERISTICS
# ============================================================================

class Characteristic(DocumentSchema):
    """Expanded, instance-level characteristic embedded in a report."""
    name: str = ""
    specification: str = ""
    check_method: str = ""
    observations: List[str] = Field(default_factory=blank_observations)

    @field_validator("name", "specification", "check_method", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        return "" if v is None else v

    @field_validator("observations", mode="before")
    @classmethod
    def normalize_observations(cls, v):
        """
        Stringify stored values and pad missing slots with "" (not measured).

        Extra values in stored data are kept so they still count towards the
        row verdict; submission rejects anything but exactly six.
        """
        if v is None:
            return blank_observations()
        values = ["" if obs is None else str(obs) for obs in v]
        return values + [""] * (OBSERVATION_SLOTS - len(values))


# ============================================================================
# DRAFTS & SUBMISSION
# ============================================================================

class ReportDraft(BaseCreateSchema):
    """Blank inspection form built from a part; filled in by the Auditor."""
    part_no: str
    part_name: str = ""
    customer: str = ""
    remarks: str = ""
    characteristics: List[Characteristic] = Field(default_factory=list)


# ============================================================================
# STORED REPORT
# ============================================================================

class Report(DocumentSchema):
    """
    Inspection report as stored.

    `status` and `last_updated_by` stay plain strings so documents written with
    an unexpected value can still be read, aggregated and exported.
    """
    id: str
    part_no: str = ""
    part_name: str = ""
    customer: str = ""
    characteristics: List[Characteristic] = Field(default_factory=list)
    remarks: str = ""
    status: str = ReportStatus.SUBMITTED.value
    submitted_by: Optional[str] = None
    submission_date: Optional[datetime] = None
    last_updated_by: Optional[str] = None

    team_leader_audit_signature: Optional[str] = Field(
        None, alias=SIGNATURE_FIELDS[Role.TEAM_LEADER_AUDIT]
    )
    hof_audit_signature: Optional[str] = Field(
        None, alias=SIGNATURE_FIELDS[Role.HOF_AUDIT]
    )
    quality_head_signature: Optional[str] = Field(
        None, alias=SIGNATURE_FIELDS[Role.QUALITY_HEAD]
    )

    @field_validator("remarks", "part_name", "customer", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        return "" if v is None else v

    @property
    def status_enum(self) -> Optional[ReportStatus]:
        return to_enum(self.status, ReportStatus)

    def signature_of(self, role: Role) -> Optional[str]:
        """User id recorded for a role; the Auditor's is the submitter."""
        if role == Role.AUDITOR:
            return self.submitted_by
        return getattr(self, _SIGNATURE_ATTRIBUTES[SIGNATURE_FIELDS[role]])


_SIGNATURE_ATTRIBUTES: Dict[str, str] = {
    field.alias: name
    for name, field in Report.model_fields.items()
    if field.alias in SIGNATURE_FIELDS.values()
}


# ============================================================================
# REVIEW
# ============================================================================

class ReviewConfirmation(DocumentSchema):
    """Reviewer input collected before an Approve is attempted."""
    reviewed_confirmed: bool = False
    signature: str = ""


class ReviewRequest(ReviewConfirmation):
    """Review request body."""
    action: ReviewAction


class ReportPatch(DocumentSchema):
    """
    Partial update produced by one workflow transition.

    Only status, lastUpdatedBy, exactly one signature field and (on reject)
    remarks are ever written; the report's core fields are never touched.
    """
    report_id: str
    from_status: ReportStatus
    status: ReportStatus
    last_updated_by: Role
    signature_field: str
    signed_by: str
    remarks: Optional[str] = None

    def to_update(self) -> dict:
        update = {
            "status": get_enum_value(self.status),
            "lastUpdatedBy": get_enum_value(self.last_updated_by),
            self.signature_field: self.signed_by,
        }
        if self.remarks is not None:
            update["remarks"] = self.remarks
        return update

    def apply(self, report: Report) -> Report:
        """Return a copy of the report with this patch applied."""
        document = report.to_document()
        document.update(self.to_update())
        return Report.model_validate(document)
