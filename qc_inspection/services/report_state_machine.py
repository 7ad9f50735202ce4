"""
Inspection Report State Machine

This module is the SINGLE SOURCE OF TRUTH for all report status transitions.
All status changes must go through this module.

Lifecycle:
    Submitted -> Reviewed by Team Leader Audit -> Reviewed by H.O.F. Audit -> Approved
    Any of the first three --(reject)--> Re-scheduling

Approved and Re-scheduling are terminal. A re-submission is a new report.

Transitions are pure: they take a report snapshot and the acting user and
return a ReportPatch (the partial update to apply). Nothing here touches the
document store.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from qc_inspection.core.exceptions import (
    Unauthenticated, Forbidden, InvalidState, ValidationFailed,
)
from qc_inspection.models.inspection import (
    Role, ReportStatus, ReviewAction, SIGNATURE_FIELDS,
)
from qc_inspection.schemas.report import Report, ReportPatch, ReviewConfirmation
from qc_inspection.schemas.user import User


logger = logging.getLogger(__name__)


TERMINAL_STATUSES = (ReportStatus.APPROVED, ReportStatus.RESCHEDULING)


# =============================================================================
# AUTHORIZATION TABLE
# =============================================================================

# (current status, acting role, action) -> next status.
# Any combination not listed here is not a legal transition.
AUTHORIZATION_TABLE: Dict[Tuple[ReportStatus, Role, ReviewAction], ReportStatus] = {
    (ReportStatus.SUBMITTED, Role.TEAM_LEADER_AUDIT, ReviewAction.APPROVE): ReportStatus.REVIEWED_BY_TEAM_LEADER,
    (ReportStatus.SUBMITTED, Role.TEAM_LEADER_AUDIT, ReviewAction.REJECT): ReportStatus.RESCHEDULING,
    (ReportStatus.REVIEWED_BY_TEAM_LEADER, Role.HOF_AUDIT, ReviewAction.APPROVE): ReportStatus.REVIEWED_BY_HOF,
    (ReportStatus.REVIEWED_BY_TEAM_LEADER, Role.HOF_AUDIT, ReviewAction.REJECT): ReportStatus.RESCHEDULING,
    (ReportStatus.REVIEWED_BY_HOF, Role.QUALITY_HEAD, ReviewAction.APPROVE): ReportStatus.APPROVED,
    (ReportStatus.REVIEWED_BY_HOF, Role.QUALITY_HEAD, ReviewAction.REJECT): ReportStatus.RESCHEDULING,
}

# Which role reviews a report in a given status
REVIEWER_FOR_STATUS: Dict[ReportStatus, Role] = {
    ReportStatus.SUBMITTED: Role.TEAM_LEADER_AUDIT,
    ReportStatus.REVIEWED_BY_TEAM_LEADER: Role.HOF_AUDIT,
    ReportStatus.REVIEWED_BY_HOF: Role.QUALITY_HEAD,
}

# Human-readable action names for each transition
TRANSITION_ACTIONS: Dict[tuple, str] = {
    (ReportStatus.SUBMITTED, ReportStatus.REVIEWED_BY_TEAM_LEADER): "Team Leader Review",
    (ReportStatus.REVIEWED_BY_TEAM_LEADER, ReportStatus.REVIEWED_BY_HOF): "H.O.F. Review",
    (ReportStatus.REVIEWED_BY_HOF, ReportStatus.APPROVED): "Final Approval",
    (ReportStatus.SUBMITTED, ReportStatus.RESCHEDULING): "Reject",
    (ReportStatus.REVIEWED_BY_TEAM_LEADER, ReportStatus.RESCHEDULING): "Reject",
    (ReportStatus.REVIEWED_BY_HOF, ReportStatus.RESCHEDULING): "Reject",
}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def is_terminal(status: ReportStatus) -> bool:
    """Is this a terminal (final) state?"""
    return status in TERMINAL_STATUSES


def reviewer_for(status: Optional[ReportStatus]) -> Optional[Role]:
    """Role allowed to act on a report in this status, if any."""
    return REVIEWER_FOR_STATUS.get(status)


def next_status(status: ReportStatus, role: Role, action: ReviewAction) -> Optional[ReportStatus]:
    """Status the transition leads to, or None if it is not in the table."""
    return AUTHORIZATION_TABLE.get((status, role, action))


def can_transition(status: ReportStatus, role: Role, action: ReviewAction) -> bool:
    """Check if a role may take an action on a report in a status."""
    return (status, role, action) in AUTHORIZATION_TABLE


def get_allowed_actions(status: Optional[ReportStatus], role: Optional[Role]) -> List[ReviewAction]:
    """Actions the presentation layer may offer this role for this status."""
    if status is None or role is None:
        return []
    return [action for action in ReviewAction if can_transition(status, role, action)]


def get_transition_action(current: ReportStatus, new: ReportStatus) -> str:
    """Get human-readable action name for a transition."""
    return TRANSITION_ACTIONS.get((current, new), f"{current.value} -> {new.value}")


def rejection_remarks(role: Role) -> str:
    return f"Rejected by {role.value} for re-scheduling."


def awaiting_review(reports: Iterable[Report], role: Optional[Role]) -> List[Report]:
    """Reports whose current status is reviewed by this role (the review queue)."""
    if role is None:
        return []
    return [report for report in reports if reviewer_for(report.status_enum) == role]


# =============================================================================
# VALIDATION
# =============================================================================

def validate_transition(
    report: Report,
    actor: Optional[User],
    action: ReviewAction,
    confirmation: Optional[ReviewConfirmation] = None,
) -> Tuple[ReportStatus, Role, ReportStatus]:
    """
    Validate a review transition. Raises if it is not allowed.

    Check order: identity, report state, role, approve preconditions.

    Returns:
        (current status, acting role, next status)
    """
    if actor is None or not actor.id:
        raise Unauthenticated("You must be signed in to perform this action.")

    current = report.status_enum
    if current is None:
        raise InvalidState(
            f"Report {report.id} has unknown status '{report.status}'.",
            details={"report_id": report.id, "status": report.status},
        )
    if is_terminal(current):
        raise InvalidState(
            f"Report {report.id} in '{current.value}' status cannot be modified. This is a terminal state.",
            details={"report_id": report.id, "status": current.value},
        )

    role = actor.role_enum
    new_status = next_status(current, role, action) if role is not None else None
    if new_status is None:
        expected = reviewer_for(current)
        raise Forbidden(
            f"You do not have permission to {action.value.lower()} this report at its current stage.",
            details={
                "report_id": report.id,
                "status": current.value,
                "role": actor.role,
                "required_role": expected.value if expected else None,
            },
        )

    if action == ReviewAction.APPROVE:
        confirmation = confirmation or ReviewConfirmation()
        if not confirmation.reviewed_confirmed:
            raise ValidationFailed(
                "Please confirm you have reviewed the report before signing.",
                error_code="CONFIRMATION_REQUIRED",
            )
        if not confirmation.signature.strip():
            raise ValidationFailed(
                "Please provide your signature before approving.",
                error_code="SIGNATURE_REQUIRED",
            )

    return current, role, new_status


# =============================================================================
# TRANSITION EXECUTOR
# =============================================================================

def transition_report(
    report: Report,
    actor: Optional[User],
    action: ReviewAction,
    confirmation: Optional[ReviewConfirmation] = None,
) -> ReportPatch:
    """
    Compute the partial update for a review action.

    This function:
    1. Validates the transition is allowed
    2. Sets the new status and lastUpdatedBy
    3. Records the acting user in the role's signature field
    4. On reject, overwrites remarks with the rejection note

    Raises:
        Unauthenticated, InvalidState, Forbidden, ValidationFailed
    """
    current, role, new_status = validate_transition(report, actor, action, confirmation)

    patch = ReportPatch(
        report_id=report.id,
        from_status=current,
        status=new_status,
        last_updated_by=role,
        signature_field=SIGNATURE_FIELDS[role],
        signed_by=actor.id,
        remarks=rejection_remarks(role) if action == ReviewAction.REJECT else None,
    )
    logger.info(
        f"Report {report.id}: {get_transition_action(current, new_status)} "
        f"({current.value} -> {new_status.value}) by {role.value} {actor.id}"
    )
    return patch


def approve(report: Report, actor: Optional[User], confirmation: Optional[ReviewConfirmation]) -> ReportPatch:
    return transition_report(report, actor, ReviewAction.APPROVE, confirmation)


def reject(report: Report, actor: Optional[User]) -> ReportPatch:
    return transition_report(report, actor, ReviewAction.REJECT)


# =============================================================================
# VISUALIZATION (for debugging/documentation)
# =============================================================================

def describe_state_machine() -> List[str]:
    """Text representation of the state machine, one line per entry."""
    lines = []
    for status in ReportStatus:
        if is_terminal(status):
            lines.append(f"{status.value}: [TERMINAL STATE]")
            continue
        lines.append(f"{status.value}: ({reviewer_for(status).value})")
        for action in ReviewAction:
            target = next_status(status, reviewer_for(status), action)
            lines.append(f"  -> {target.value} ({get_transition_action(status, target)})")
    return lines


if __name__ == "__main__":
    # Run this file directly to see the state diagram
    print("\n".join(describe_state_machine()))
