"""
Log sheet projection and CSV export.

A log sheet is the flat, exportable view of one report: header, one row per
characteristic with its six observations and OK / NOT OK, the four role
signatures resolved to emails, and the remarks.
"""
import csv
import io
from typing import Dict, Iterable, Optional

from qc_inspection.config import settings
from qc_inspection.models.inspection import (
    NO_REMARKS, NOT_AVAILABLE, OBSERVATION_SLOTS, PENDING_SIGNATURE, Role,
)
from qc_inspection.schemas.report import Report
from qc_inspection.schemas.reporting import (
    LogSheet, LogSheetMeta, LogSheetRow, LogSheetSignatures,
)
from qc_inspection.schemas.user import User
from qc_inspection.services.tolerance_service import pass_fail_label


ROW_HEADERS = [
    "Characteristic",
    "Specification",
    "Check Method",
    *[f"Observation {i}" for i in range(1, OBSERVATION_SLOTS + 1)],
    "OK/NOT OK",
]


def format_submission_date(report: Report) -> str:
    if report.submission_date is None:
        return NOT_AVAILABLE
    return report.submission_date.strftime(settings.SUBMISSION_DATE_FORMAT)


def _resolve_signature(user_id: Optional[str], emails: Dict[str, str]) -> str:
    if not user_id:
        return PENDING_SIGNATURE
    return emails.get(user_id) or PENDING_SIGNATURE


def project(report: Report, users: Iterable[User]) -> LogSheet:
    """Build the log sheet for a report. The report is not modified."""
    emails = {user.id: user.email for user in users}

    rows = []
    for characteristic in report.characteristics:
        observations = list(characteristic.observations)[:OBSERVATION_SLOTS]
        observations += [""] * (OBSERVATION_SLOTS - len(observations))
        rows.append(
            LogSheetRow(
                characteristic=characteristic.name,
                specification=characteristic.specification,
                check_method=characteristic.check_method,
                **{f"observation_{i + 1}": obs for i, obs in enumerate(observations)},
                pass_fail=pass_fail_label(characteristic.observations, characteristic.specification),
            )
        )

    return LogSheet(
        report_id=report.id,
        meta=LogSheetMeta(
            part_name=report.part_name,
            part_no=report.part_no,
            customer=report.customer,
            submission_date=format_submission_date(report),
        ),
        rows=rows,
        signatures=LogSheetSignatures(
            auditor=_resolve_signature(report.signature_of(Role.AUDITOR), emails),
            team_leader_audit=_resolve_signature(report.signature_of(Role.TEAM_LEADER_AUDIT), emails),
            hof_audit=_resolve_signature(report.signature_of(Role.HOF_AUDIT), emails),
            quality_head=_resolve_signature(report.signature_of(Role.QUALITY_HEAD), emails),
        ),
        remarks=report.remarks or NO_REMARKS,
    )


def render_csv(sheet: LogSheet) -> str:
    """
    Render a log sheet as CSV text.

    Layout: header block, characteristic table, remarks, signatures.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["Report ID:", sheet.report_id])
    writer.writerow(["Part Name:", sheet.meta.part_name])
    writer.writerow(["Part No:", sheet.meta.part_no])
    writer.writerow(["Customer:", sheet.meta.customer])
    writer.writerow(["Submission Date:", sheet.meta.submission_date])
    writer.writerow([])

    writer.writerow(ROW_HEADERS)
    for row in sheet.rows:
        writer.writerow([
            row.characteristic,
            row.specification,
            row.check_method,
            *row.observations,
            row.pass_fail,
        ])
    writer.writerow([])

    writer.writerow(["Remarks:", sheet.remarks])
    writer.writerow([])
    writer.writerow(["Signatures"])
    writer.writerow([f"{Role.AUDITOR.value}:", sheet.signatures.auditor])
    writer.writerow([f"{Role.TEAM_LEADER_AUDIT.value}:", sheet.signatures.team_leader_audit])
    writer.writerow([f"{Role.HOF_AUDIT.value}:", sheet.signatures.hof_audit])
    writer.writerow([f"{Role.QUALITY_HEAD.value}:", sheet.signatures.quality_head])

    return buffer.getvalue()


def csv_filename(sheet: LogSheet) -> str:
    return f"Inspection_Log_{sheet.report_id}.csv"
