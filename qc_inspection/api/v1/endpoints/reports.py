from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from qc_inspection.api.deps import CurrentUser, Reports
from qc_inspection.models.inspection import ReviewAction
from qc_inspection.schemas.report import Report, ReportDraft, ReviewConfirmation, ReviewRequest
from qc_inspection.schemas.reporting import LogSheet
from qc_inspection.services import log_sheet_service

router = APIRouter(tags=["Inspection Reports"])


# ==================== Authoring ====================

@router.get("/draft", response_model=ReportDraft)
async def start_report(
    reports: Reports,
    current_user: CurrentUser,
    part_no: str = Query(..., alias="partNo"),
):
    """Blank inspection form for a part, with repeated characteristics expanded."""
    return await reports.start_report_for(current_user, part_no)


@router.post("", response_model=Report, status_code=status.HTTP_201_CREATED)
async def submit_report(draft: ReportDraft, reports: Reports, current_user: CurrentUser):
    """Submit a filled-in report. Auditors only."""
    return await reports.submit_report(current_user, draft)


# ==================== Listing ====================

@router.get("", response_model=List[Report])
async def list_reports(
    reports: Reports,
    current_user: CurrentUser,
    part_no: Optional[str] = Query(None, alias="partNo"),
):
    """Report logs. Auditors only see their own submissions."""
    return await reports.logs(current_user, part_no)


@router.get("/queue", response_model=List[Report])
async def review_queue(reports: Reports, current_user: CurrentUser):
    """Reports waiting on the current user's role."""
    return await reports.review_queue(current_user)


@router.get("/{report_id}", response_model=Report)
async def get_report(report_id: str, reports: Reports, current_user: CurrentUser):
    return await reports.read_report(current_user, report_id)


# ==================== Review ====================

@router.get("/{report_id}/actions", response_model=List[ReviewAction])
async def get_allowed_actions(report_id: str, reports: Reports, current_user: CurrentUser):
    """Review actions the current user may take on this report."""
    return await reports.allowed_actions(current_user, report_id)


@router.post("/{report_id}/review", response_model=Report)
async def review_report(
    report_id: str,
    request: ReviewRequest,
    reports: Reports,
    current_user: CurrentUser,
):
    """Approve or reject a report."""
    return await reports.review(current_user, report_id, request.action, request)


@router.post("/{report_id}/approve", response_model=Report)
async def approve_report(
    report_id: str,
    confirmation: ReviewConfirmation,
    reports: Reports,
    current_user: CurrentUser,
):
    """Approve a report. Requires the review confirmation and a signature."""
    return await reports.approve(current_user, report_id, confirmation)


@router.post("/{report_id}/reject", response_model=Report)
async def reject_report(report_id: str, reports: Reports, current_user: CurrentUser):
    """Reject a report for re-scheduling."""
    return await reports.reject(current_user, report_id)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: str, reports: Reports, current_user: CurrentUser):
    """Delete a report. Quality Head only."""
    await reports.delete_report(current_user, report_id)


# ==================== Log Sheet ====================

@router.get("/{report_id}/log-sheet", response_model=LogSheet)
async def get_log_sheet(report_id: str, reports: Reports, current_user: CurrentUser):
    """Printable view of a report."""
    return await reports.log_sheet(current_user, report_id)


@router.get("/{report_id}/log-sheet/csv")
async def download_log_sheet(report_id: str, reports: Reports, current_user: CurrentUser):
    """Log sheet as a CSV download."""
    sheet = await reports.log_sheet(current_user, report_id)
    return Response(
        content=log_sheet_service.render_csv(sheet),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={log_sheet_service.csv_filename(sheet)}"}
    )
