"""
Read-side Reporting Schemas.

- LogSheet: flat, exportable view of one report
- ComplianceGrid / ComplianceReport: part x month status grid
"""
from typing import Dict, List

from pydantic import Field

from qc_inspection.schemas.base import DocumentSchema
from qc_inspection.schemas.part import PartSummary


# ============================================================================
# LOG SHEET
# ============================================================================

class LogSheetMeta(DocumentSchema):
    part_name: str
    part_no: str
    customer: str
    submission_date: str


class LogSheetRow(DocumentSchema):
    """One characteristic with its six observations and the row verdict."""
    characteristic: str
    specification: str
    check_method: str
    observation_1: str = ""
    observation_2: str = ""
    observation_3: str = ""
    observation_4: str = ""
    observation_5: str = ""
    observation_6: str = ""
    pass_fail: str

    @property
    def observations(self) -> List[str]:
        return [
            self.observation_1, self.observation_2, self.observation_3,
            self.observation_4, self.observation_5, self.observation_6,
        ]


class LogSheetSignatures(DocumentSchema):
    """Signer emails per role, or "Pending"."""
    auditor: str
    team_leader_audit: str
    hof_audit: str
    quality_head: str


class LogSheet(DocumentSchema):
    report_id: str
    meta: LogSheetMeta
    rows: List[LogSheetRow] = Field(default_factory=list)
    signatures: LogSheetSignatures
    remarks: str


# ============================================================================
# COMPLIANCE
# ============================================================================

class ComplianceGrid(DocumentSchema):
    """
    months: trailing window, oldest first ("Jan 2026")
    grid: partNo -> month -> status value or "No data"
    parts: the (customer-filtered) parts, in input order
    """
    months: List[str]
    grid: Dict[str, Dict[str, str]]
    parts: List[PartSummary] = Field(default_factory=list)


class ComplianceReport(ComplianceGrid):
    """Grid plus what the consumer-facing renderer shows around it."""
    customer: str = ""
    customers: List[str] = Field(default_factory=list)
    abbreviations: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    legend: Dict[str, str] = Field(default_factory=dict)
    signatories: Dict[str, str] = Field(default_factory=dict)
