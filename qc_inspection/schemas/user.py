"""
User Schemas.

The role is attached once, at sign-up, after the role's shared code has been
checked. Authentication itself (passwords, sessions) is handled outside.
"""
from datetime import datetime
from typing import Optional

from qc_inspection.core.enum_utils import to_enum
from qc_inspection.models.inspection import Role
from qc_inspection.schemas.base import DocumentSchema, BaseCreateSchema


class User(DocumentSchema):
    """User as stored. `role` is the human-readable role name."""
    id: str
    email: str = ""
    role: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def role_enum(self) -> Optional[Role]:
        return to_enum(self.role, Role)


class SignupRequest(BaseCreateSchema):
    """Sign-up input. `user_id` is the identity issued by the auth provider."""
    email: str
    role: Role
    auth_code: str
    user_id: Optional[str] = None


class TokenResponse(DocumentSchema):
    access_token: str
    token_type: str = "bearer"
    user: User


class UserCapabilities(DocumentSchema):
    """What the acting user's role unlocks, for hiding UI the role can't use."""
    can_submit_reports: bool = False
    can_manage_parts: bool = False
    can_manage_users: bool = False
    can_delete_reports: bool = False
    sees_all_reports: bool = False


class CurrentUserResponse(DocumentSchema):
    user: User
    capabilities: UserCapabilities
