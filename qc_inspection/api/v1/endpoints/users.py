from typing import List

from fastapi import APIRouter, status

from qc_inspection.api.deps import CurrentUser, Users
from qc_inspection.core.permissions import RoleChecker
from qc_inspection.models.inspection import Role
from qc_inspection.schemas.user import User

router = APIRouter(tags=["Users"])


@router.get("", response_model=List[User])
async def list_users(users: Users, current_user: CurrentUser):
    """List users. Quality Head only."""
    RoleChecker(current_user).require_role(Role.QUALITY_HEAD)
    return await users.list_users()


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user_access(user_id: str, users: Users, current_user: CurrentUser):
    """Remove a user's access. The last Quality Head cannot be removed."""
    await users.remove_user_access(current_user, user_id)
