"""
Report State Machine Tests.

Tests for:
- The authorization table over every status, role and action
- Transition side effects (status, lastUpdatedBy, signature, remarks)
- Failure kinds and their precedence
"""

import pytest

from qc_inspection.core.exceptions import Forbidden, InvalidState, Unauthenticated, ValidationFailed
from qc_inspection.models.inspection import ReportStatus, ReviewAction, Role
from qc_inspection.schemas.report import ReviewConfirmation
from qc_inspection.services import report_state_machine as sm


APPROVE_NEXT = {
    (ReportStatus.SUBMITTED, Role.TEAM_LEADER_AUDIT): ReportStatus.REVIEWED_BY_TEAM_LEADER,
    (ReportStatus.REVIEWED_BY_TEAM_LEADER, Role.HOF_AUDIT): ReportStatus.REVIEWED_BY_HOF,
    (ReportStatus.REVIEWED_BY_HOF, Role.QUALITY_HEAD): ReportStatus.APPROVED,
}

TERMINAL = [ReportStatus.APPROVED, ReportStatus.RESCHEDULING]


class TestAuthorizationTable:
    """Every (status, role, action) combination."""

    @pytest.mark.parametrize("status", list(ReportStatus))
    @pytest.mark.parametrize("role", list(Role))
    @pytest.mark.parametrize("action", list(ReviewAction))
    def test_every_combination(self, make_report, users_by_role, confirmation, status, role, action):
        report = make_report(status=status)
        actor = users_by_role[role]

        if status in TERMINAL:
            with pytest.raises(InvalidState):
                sm.transition_report(report, actor, action, confirmation)
            return

        if (status, role) not in APPROVE_NEXT:
            with pytest.raises(Forbidden):
                sm.transition_report(report, actor, action, confirmation)
            return

        patch = sm.transition_report(report, actor, action, confirmation)
        if action == ReviewAction.APPROVE:
            assert patch.status == APPROVE_NEXT[(status, role)]
        else:
            assert patch.status == ReportStatus.RESCHEDULING
        assert patch.from_status == status
        assert patch.last_updated_by == role

    def test_submitted_offers_actions_only_to_team_leader(self):
        for role in Role:
            actions = sm.get_allowed_actions(ReportStatus.SUBMITTED, role)
            if role == Role.TEAM_LEADER_AUDIT:
                assert actions == [ReviewAction.APPROVE, ReviewAction.REJECT]
            else:
                assert actions == []

    def test_terminal_statuses_offer_nothing(self):
        for status in TERMINAL:
            assert sm.is_terminal(status)
            assert all(sm.get_allowed_actions(status, role) == [] for role in Role)

    def test_reviewer_for(self):
        assert sm.reviewer_for(ReportStatus.SUBMITTED) == Role.TEAM_LEADER_AUDIT
        assert sm.reviewer_for(ReportStatus.REVIEWED_BY_TEAM_LEADER) == Role.HOF_AUDIT
        assert sm.reviewer_for(ReportStatus.REVIEWED_BY_HOF) == Role.QUALITY_HEAD
        assert sm.reviewer_for(ReportStatus.APPROVED) is None
        assert sm.reviewer_for(None) is None


class TestTransitions:
    """Side effects of each transition."""

    def test_happy_path_accumulates_three_signatures(self, make_report, reviewers, confirmation):
        report = make_report()
        original_remarks = report.remarks

        for _ in range(3):
            actor = reviewers[report.status_enum]
            report = sm.approve(report, actor, confirmation).apply(report)

        assert report.status == ReportStatus.APPROVED.value
        assert report.team_leader_audit_signature == "u-tla"
        assert report.hof_audit_signature == "u-hof"
        assert report.quality_head_signature == "u-qh"
        assert report.last_updated_by == Role.QUALITY_HEAD.value
        assert report.remarks == original_remarks

    def test_approve_patch_fields(self, make_report, team_leader, confirmation):
        patch = sm.approve(make_report(report_id="R-1"), team_leader, confirmation)

        assert patch.to_update() == {
            "status": "Reviewed by Team Leader Audit",
            "lastUpdatedBy": "Team Leader Audit",
            "teamleaderauditSignature": "u-tla",
        }

    def test_reject_overwrites_remarks(self, make_report, hof):
        report = make_report(status=ReportStatus.REVIEWED_BY_TEAM_LEADER)

        patch = sm.reject(report, hof)

        assert patch.to_update() == {
            "status": "Re-scheduling",
            "lastUpdatedBy": "H.O.F. Audit",
            "hofauditSignature": "u-hof",
            "remarks": "Rejected by H.O.F. Audit for re-scheduling.",
        }

    def test_reject_needs_no_confirmation(self, make_report, team_leader):
        patch = sm.reject(make_report(), team_leader)
        assert patch.status == ReportStatus.RESCHEDULING

    def test_apply_does_not_touch_source_report(self, make_report, team_leader, confirmation):
        report = make_report()
        before = report.model_dump()

        sm.approve(report, team_leader, confirmation).apply(report)

        assert report.model_dump() == before

    def test_apply_keeps_core_fields(self, make_report, quality_head, confirmation):
        report = make_report(status=ReportStatus.REVIEWED_BY_HOF)

        approved = sm.approve(report, quality_head, confirmation).apply(report)

        assert approved.characteristics == report.characteristics
        assert approved.submitted_by == report.submitted_by
        assert approved.submission_date == report.submission_date


class TestFailures:
    """Failure kinds and the order they are checked in."""

    def test_no_identity_is_unauthenticated(self, make_report, confirmation):
        with pytest.raises(Unauthenticated):
            sm.approve(make_report(), None, confirmation)

    def test_identity_checked_before_state(self, make_report):
        with pytest.raises(Unauthenticated):
            sm.reject(make_report(status=ReportStatus.APPROVED), None)

    def test_unknown_status_is_invalid_state(self, make_report, team_leader, confirmation):
        with pytest.raises(InvalidState):
            sm.approve(make_report(status="Pending legacy"), team_leader, confirmation)

    def test_user_without_role_is_forbidden(self, make_report, confirmation):
        from qc_inspection.schemas.user import User

        with pytest.raises(Forbidden) as exc_info:
            sm.approve(make_report(), User(id="u-x", email="x@example.com"), confirmation)
        assert exc_info.value.details["required_role"] == Role.TEAM_LEADER_AUDIT.value

    def test_approve_requires_confirmation(self, make_report, team_leader):
        with pytest.raises(ValidationFailed) as exc_info:
            sm.approve(make_report(), team_leader, ReviewConfirmation(signature="J. Reviewer"))
        assert exc_info.value.error_code == "CONFIRMATION_REQUIRED"

    def test_approve_without_confirmation_object(self, make_report, team_leader):
        with pytest.raises(ValidationFailed):
            sm.approve(make_report(), team_leader, None)

    def test_approve_requires_signature(self, make_report, team_leader):
        with pytest.raises(ValidationFailed) as exc_info:
            sm.approve(make_report(), team_leader, ReviewConfirmation(reviewed_confirmed=True, signature="  "))
        assert exc_info.value.error_code == "SIGNATURE_REQUIRED"

    def test_wrong_role_checked_before_confirmation(self, make_report, hof):
        with pytest.raises(Forbidden):
            sm.approve(make_report(), hof, None)


class TestReviewQueue:

    def test_awaiting_review_filters_by_role(self, make_report):
        reports = [
            make_report(report_id="a", status=ReportStatus.SUBMITTED),
            make_report(report_id="b", status=ReportStatus.REVIEWED_BY_TEAM_LEADER),
            make_report(report_id="c", status=ReportStatus.REVIEWED_BY_HOF),
            make_report(report_id="d", status=ReportStatus.APPROVED),
            make_report(report_id="e", status="Unknown"),
        ]

        assert [r.id for r in sm.awaiting_review(reports, Role.TEAM_LEADER_AUDIT)] == ["a"]
        assert [r.id for r in sm.awaiting_review(reports, Role.HOF_AUDIT)] == ["b"]
        assert [r.id for r in sm.awaiting_review(reports, Role.QUALITY_HEAD)] == ["c"]
        assert sm.awaiting_review(reports, Role.AUDITOR) == []
        assert sm.awaiting_review(reports, None) == []

    def test_describe_state_machine(self):
        lines = sm.describe_state_machine()
        assert "Approved: [TERMINAL STATE]" in lines
        assert "Submitted: (Team Leader Audit)" in lines
