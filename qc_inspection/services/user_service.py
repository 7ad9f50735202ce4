"""
User Service.

Sign-up with a role code, user listing and removal of user access.
"""
import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from qc_inspection.config import settings
from qc_inspection.core.exceptions import Forbidden, NotFound, ValidationFailed
from qc_inspection.core.permissions import RoleChecker
from qc_inspection.models.inspection import Role
from qc_inspection.schemas.user import SignupRequest, User
from qc_inspection.services.document_utils import apply_store_operation, parse_documents
from qc_inspection.store import DocumentStore, USERS


logger = logging.getLogger(__name__)


def check_role_code(role: Role, auth_code: str) -> None:
    """Raise Forbidden unless the code matches the one configured for the role."""
    expected = settings.ROLE_SIGNUP_CODES.get(role.value)
    if not expected:
        raise ValidationFailed(
            f"Sign-up is not available for role {role.value}.",
            error_code="ROLE_NOT_OPEN",
            details={"role": role.value},
        )
    if not secrets.compare_digest(auth_code or "", expected):
        raise Forbidden(
            "Invalid authorization code for the selected role.",
            error_code="INVALID_ROLE_CODE",
            details={"role": role.value},
        )


class UserService:
    """Service for user management."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_users(self) -> List[User]:
        return parse_documents(User, await self.store.list(USERS), "user")

    async def get_user(self, user_id: str) -> User:
        document = await self.store.get(USERS, user_id)
        if document is None:
            raise NotFound(f"User {user_id} not found", details={"user_id": user_id})
        return User.model_validate(document)

    async def find_user(self, user_id: str) -> Optional[User]:
        document = await self.store.get(USERS, user_id)
        return User.model_validate(document) if document is not None else None

    async def signup(self, data: SignupRequest) -> User:
        """
        Register a user with a role.

        The role code is checked first. Email addresses are unique
        (case-insensitive) and an existing user id is never reused.
        """
        check_role_code(data.role, data.auth_code)

        email = data.email.strip()
        if not email:
            raise ValidationFailed("Email is required.", error_code="EMAIL_REQUIRED")
        for user in await self.list_users():
            if user.email.lower() == email.lower():
                raise ValidationFailed(
                    f"A user with email {email} already exists.",
                    error_code="DUPLICATE_EMAIL",
                    details={"email": email},
                )

        if data.user_id and await self.find_user(data.user_id) is not None:
            raise ValidationFailed(
                f"User {data.user_id} already exists.",
                error_code="DUPLICATE_USER",
                details={"user_id": data.user_id},
            )

        user = User(
            id=data.user_id or uuid.uuid4().hex,
            email=email,
            role=data.role.value,
            created_at=datetime.now(timezone.utc),
        )
        document = user.to_document()
        document.pop("id")
        await apply_store_operation(self.store.set(USERS, user.id, document), "create user")
        logger.info(f"User {user.id} signed up as {user.role}")
        return user

    async def remove_user_access(self, actor: Optional[User], user_id: str) -> None:
        """
        Remove a user's access. Quality Head only.

        Nobody can remove themselves, and the last Quality Head stays.
        """
        admin = RoleChecker(actor).require_role(Role.QUALITY_HEAD)
        if admin.id == user_id:
            raise ValidationFailed(
                "You cannot remove your own access.",
                error_code="SELF_REMOVAL",
                details={"user_id": user_id},
            )

        target = await self.get_user(user_id)
        if target.role_enum == Role.QUALITY_HEAD:
            quality_heads = [u for u in await self.list_users() if u.role_enum == Role.QUALITY_HEAD]
            if len(quality_heads) <= 1:
                raise ValidationFailed(
                    "Cannot remove the last Quality Head.",
                    error_code="LAST_QUALITY_HEAD",
                    details={"user_id": user_id},
                )

        await apply_store_operation(self.store.delete(USERS, user_id), "remove user")
        logger.info(f"User {user_id} ({target.email}) removed by {admin.id}")
