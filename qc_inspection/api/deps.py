from typing import Annotated, Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from qc_inspection.core.security import read_access_token
from qc_inspection.schemas.user import User
from qc_inspection.services import PartService, ReportService, UserService
from qc_inspection.store import DocumentStore, get_store


logger = logging.getLogger(__name__)

# HTTP Bearer security scheme. A missing header is not an error here: the
# services raise Unauthenticated themselves when an identity is required.
security = HTTPBearer(auto_error=False)


Store = Annotated[DocumentStore, Depends(get_store)]


async def get_current_user(
    store: Store,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[User]:
    """
    Dependency to get the acting user, or None when no token was sent.

    A token that is present but does not match a stored user holding the
    same role is rejected with 401.
    """
    if credentials is None:
        return None

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    claims = read_access_token(credentials.credentials)
    if claims is None:
        logger.warning("Token verification failed - invalid or expired token")
        raise credentials_exception

    user = await UserService(store).find_user(claims.user_id)
    if user is None:
        logger.warning(f"User {claims.user_id} from token not found")
        raise credentials_exception
    if user.role != claims.role:
        logger.warning(f"User {user.id} token role {claims.role} does not match stored role {user.role}")
        raise credentials_exception

    return user


async def get_report_service(store: Store) -> ReportService:
    return ReportService(store)


async def get_part_service(store: Store) -> PartService:
    return PartService(store)


async def get_user_service(store: Store) -> UserService:
    return UserService(store)


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[Optional[User], Depends(get_current_user)]
Reports = Annotated[ReportService, Depends(get_report_service)]
Parts = Annotated[PartService, Depends(get_part_service)]
Users = Annotated[UserService, Depends(get_user_service)]
