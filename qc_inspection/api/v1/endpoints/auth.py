from fastapi import APIRouter, status

from qc_inspection.api.deps import CurrentUser, Users
from qc_inspection.core.permissions import RoleChecker
from qc_inspection.core.security import create_access_token
from qc_inspection.schemas.user import (
    CurrentUserResponse,
    SignupRequest,
    TokenResponse,
    UserCapabilities,
)

router = APIRouter(tags=["Authentication"])


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignupRequest, users: Users):
    """
    Register a user with a role.

    The role's authorization code must match; the returned bearer token
    identifies the user on every other endpoint.
    """
    user = await users.signup(data)
    return TokenResponse(
        access_token=create_access_token(user),
        user=user,
    )


@router.get("/me", response_model=CurrentUserResponse)
async def read_current_user(current_user: CurrentUser):
    """Current user and the capabilities of their role."""
    checker = RoleChecker(current_user)
    user = checker.require_authenticated()
    return CurrentUserResponse(
        user=user,
        capabilities=UserCapabilities(
            can_submit_reports=checker.can_submit_reports(),
            can_manage_parts=checker.can_manage_parts(),
            can_manage_users=checker.can_manage_users(),
            can_delete_reports=checker.can_delete_reports(),
            sees_all_reports=checker.sees_all_reports(),
        ),
    )
