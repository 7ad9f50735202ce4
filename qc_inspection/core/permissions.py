from typing import Optional

from qc_inspection.core.exceptions import Forbidden, Unauthenticated
from qc_inspection.models.inspection import Role
from qc_inspection.schemas.user import User


# Escalation order; lower value = earlier in the sign-off chain
ROLE_ORDER = {
    Role.AUDITOR: 0,
    Role.TEAM_LEADER_AUDIT: 1,
    Role.HOF_AUDIT: 2,
    Role.QUALITY_HEAD: 3,
}


class RoleChecker:
    """
    Capability checks for the acting user.

    Workflow transitions are authorized by the report state machine's table;
    this class covers everything else (administration, report authoring).
    """

    def __init__(self, user: Optional[User]):
        self.user = user
        self.role = user.role_enum if user is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.user.id)

    def require_authenticated(self) -> User:
        if not self.is_authenticated:
            raise Unauthenticated("You must be signed in to perform this action.")
        return self.user

    def has_role(self, *roles: Role) -> bool:
        return self.role is not None and self.role in roles

    def require_role(self, *roles: Role) -> User:
        """
        Require one of the given roles.

        Raises:
            Unauthenticated: no acting identity
            Forbidden: identity present, role not allowed
        """
        user = self.require_authenticated()
        if not self.has_role(*roles):
            raise Forbidden(
                f"Permission denied. Required role: {', '.join(role.value for role in roles)}",
                details={"role": user.role, "required": [role.value for role in roles]},
            )
        return user

    def can_manage_parts(self) -> bool:
        return self.has_role(Role.QUALITY_HEAD)

    def can_manage_users(self) -> bool:
        return self.has_role(Role.QUALITY_HEAD)

    def can_delete_reports(self) -> bool:
        return self.has_role(Role.QUALITY_HEAD)

    def can_submit_reports(self) -> bool:
        return self.has_role(Role.AUDITOR)

    def sees_all_reports(self) -> bool:
        """Auditors only see their own submissions in the logs view."""
        return self.role is not None and ROLE_ORDER[self.role] > ROLE_ORDER[Role.AUDITOR]
