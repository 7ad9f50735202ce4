from typing import Optional

from fastapi import APIRouter, Query

from qc_inspection.api.deps import CurrentUser, Reports
from qc_inspection.schemas.reporting import ComplianceReport

router = APIRouter(tags=["Compliance"])


@router.get("", response_model=ComplianceReport)
async def get_compliance_report(
    reports: Reports,
    current_user: CurrentUser,
    customer: Optional[str] = Query(None, description="Only parts for this customer"),
):
    """
    Part x month compliance grid for the trailing window.

    Each cell holds the status of the latest report submitted for the part in
    that month, or "No data".
    """
    return await reports.compliance_report(current_user, customer=customer or None)
