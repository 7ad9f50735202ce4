"""
Inspection Report Service.

Business logic around the report lifecycle:
- Starting a report (blank form expanded from a part)
- Submission by an Auditor
- Review transitions (approve / reject) applied as guarded partial updates
- Review queue, logs and log sheets
- Administrative deletion
"""
import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from qc_inspection.core.exceptions import InspectionError, NotFound, ValidationFailed
from qc_inspection.core.permissions import RoleChecker
from qc_inspection.models.inspection import OBSERVATION_SLOTS, Role, ReportStatus, ReviewAction
from qc_inspection.schemas.part import Part
from qc_inspection.schemas.report import Report, ReportDraft, ReviewConfirmation
from qc_inspection.schemas.reporting import ComplianceReport, LogSheet
from qc_inspection.schemas.user import User
from qc_inspection.services import (
    characteristic_service, compliance_service, log_sheet_service, report_state_machine,
)
from qc_inspection.services.document_utils import apply_store_operation, parse_documents
from qc_inspection.store import DocumentStore, PARTS, REPORTS, USERS


logger = logging.getLogger(__name__)


def generate_report_id(part_no: str, now: datetime) -> str:
    """Report id: business key plus creation time in epoch milliseconds."""
    return f"{part_no}-{int(now.timestamp() * 1000)}"


class ReportService:
    """Service for inspection report operations."""

    def __init__(self, store: DocumentStore):
        self.store = store

    # ========================================================================
    # SNAPSHOTS
    # ========================================================================

    async def list_reports(self) -> List[Report]:
        return parse_documents(Report, await self.store.list(REPORTS), "report")

    async def list_users(self) -> List[User]:
        return parse_documents(User, await self.store.list(USERS), "user")

    async def list_parts(self) -> List[Part]:
        return parse_documents(Part, await self.store.list(PARTS), "part")

    async def get_report(self, report_id: str) -> Report:
        document = await self.store.get(REPORTS, report_id)
        if document is None:
            raise NotFound(f"Report {report_id} not found", details={"report_id": report_id})
        return Report.model_validate(document)

    async def get_part_by_number(self, part_no: str) -> Part:
        for document in await self.store.list(PARTS):
            if document.get("partNo") == part_no:
                return Part.model_validate(document)
        raise NotFound(f"Part {part_no} not found", details={"part_no": part_no})

    # ========================================================================
    # AUTHORING
    # ========================================================================

    @staticmethod
    def start_report(part: Part) -> ReportDraft:
        """Blank inspection form for a part, characteristics expanded."""
        return ReportDraft(
            part_no=part.part_no,
            part_name=part.part_name,
            customer=part.customer,
            remarks="",
            characteristics=characteristic_service.expand(part),
        )

    async def start_report_for(self, actor: Optional[User], part_no: str) -> ReportDraft:
        RoleChecker(actor).require_role(Role.AUDITOR)
        return self.start_report(await self.get_part_by_number(part_no))

    @staticmethod
    def build_report(actor: User, part: Part, draft: ReportDraft, now: datetime) -> Report:
        """
        Turn a filled-in draft into a Submitted report.

        Part identity and characteristics come from the stored part, expanded
        again here; only the observations and remarks are taken from the draft.
        """
        if not draft.characteristics:
            raise ValidationFailed(
                "A report must contain at least one characteristic.",
                error_code="CHARACTERISTICS_REQUIRED",
            )

        characteristics = characteristic_service.expand(part)
        expected = [c.name for c in characteristics]
        received = [c.name for c in draft.characteristics]
        if received != expected:
            raise ValidationFailed(
                f"Characteristics do not match part {part.part_no}.",
                error_code="CHARACTERISTICS_MISMATCH",
                details={"expected": expected, "received": received},
            )

        for characteristic, filled in zip(characteristics, draft.characteristics):
            if len(filled.observations) != OBSERVATION_SLOTS:
                raise ValidationFailed(
                    f"Characteristic '{filled.name}' must have {OBSERVATION_SLOTS} observation slots.",
                    error_code="OBSERVATION_SLOTS",
                    details={"characteristic": filled.name, "count": len(filled.observations)},
                )
            characteristic.observations = list(filled.observations)

        return Report(
            id=generate_report_id(part.part_no, now),
            part_no=part.part_no,
            part_name=part.part_name,
            customer=part.customer,
            characteristics=characteristics,
            remarks=draft.remarks,
            status=ReportStatus.SUBMITTED.value,
            submitted_by=actor.id,
            submission_date=now,
        )

    async def submit_report(
        self,
        actor: Optional[User],
        draft: ReportDraft,
        now: Optional[datetime] = None,
    ) -> Report:
        """Submit a report. Auditors only."""
        user = RoleChecker(actor).require_role(Role.AUDITOR)
        if not draft.part_no:
            raise ValidationFailed("A report must reference a part.", error_code="PART_REQUIRED")
        part = await self.get_part_by_number(draft.part_no)
        report = self.build_report(user, part, draft, now or datetime.now(timezone.utc))

        document = report.to_document()
        document.pop("id")
        await apply_store_operation(self.store.set(REPORTS, report.id, document), "submit report")
        logger.info(f"Report {report.id} submitted by {user.id} for part {report.part_no}")
        return report

    # ========================================================================
    # REVIEW
    # ========================================================================

    async def review(
        self,
        actor: Optional[User],
        report_id: str,
        action: ReviewAction,
        confirmation: Optional[ReviewConfirmation] = None,
    ) -> Report:
        """
        Apply a review action to a report.

        The patch is written only if the stored status is still the one the
        transition was computed from; a stale second reviewer gets
        ConcurrentUpdateError instead of overwriting the first.
        """
        report = await self.get_report(report_id)
        try:
            patch = report_state_machine.transition_report(report, actor, action, confirmation)
        except InspectionError as e:
            logger.warning(f"Review of report {report_id} refused: {e.error_code} - {e.message}")
            raise

        await apply_store_operation(
            self.store.update(
                REPORTS,
                report_id,
                patch.to_update(),
                precondition={"status": patch.from_status.value},
            ),
            "update report status",
        )
        return patch.apply(report)

    async def approve(self, actor: Optional[User], report_id: str, confirmation: ReviewConfirmation) -> Report:
        return await self.review(actor, report_id, ReviewAction.APPROVE, confirmation)

    async def reject(self, actor: Optional[User], report_id: str) -> Report:
        return await self.review(actor, report_id, ReviewAction.REJECT)

    async def allowed_actions(self, actor: Optional[User], report_id: str) -> List[ReviewAction]:
        """Review actions the actor may take on a report right now."""
        checker = RoleChecker(actor)
        checker.require_authenticated()
        report = await self.get_report(report_id)
        return report_state_machine.get_allowed_actions(report.status_enum, checker.role)

    async def review_queue(self, actor: Optional[User]) -> List[Report]:
        """Reports waiting on the actor's role."""
        checker = RoleChecker(actor)
        checker.require_authenticated()
        return report_state_machine.awaiting_review(await self.list_reports(), checker.role)

    # ========================================================================
    # LOGS & EXPORT
    # ========================================================================

    async def logs(self, actor: Optional[User], part_no: Optional[str] = None) -> List[Report]:
        """
        Report history, optionally for one part.

        Auditors see only the reports they submitted.
        """
        checker = RoleChecker(actor)
        user = checker.require_authenticated()
        reports = await self.list_reports()
        if part_no:
            reports = [r for r in reports if r.part_no == part_no]
        if not checker.sees_all_reports():
            reports = [r for r in reports if r.submitted_by == user.id]
        return reports

    async def read_report(self, actor: Optional[User], report_id: str) -> Report:
        RoleChecker(actor).require_authenticated()
        return await self.get_report(report_id)

    async def log_sheet(self, actor: Optional[User], report_id: str) -> LogSheet:
        report = await self.read_report(actor, report_id)
        return log_sheet_service.project(report, await self.list_users())

    async def compliance_report(
        self,
        actor: Optional[User],
        customer: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ComplianceReport:
        """Part x month compliance grid over the current snapshot."""
        RoleChecker(actor).require_authenticated()
        return compliance_service.build_compliance_report(
            await self.list_reports(),
            await self.list_parts(),
            await self.list_users(),
            customer=customer,
            today=today,
        )

    # ========================================================================
    # ADMINISTRATION
    # ========================================================================

    async def delete_report(self, actor: Optional[User], report_id: str) -> None:
        """Delete a report. Quality Head only."""
        user = RoleChecker(actor).require_role(Role.QUALITY_HEAD)
        await self.get_report(report_id)
        await apply_store_operation(self.store.delete(REPORTS, report_id), "delete report")
        logger.info(f"Report {report_id} deleted by {user.id}")

