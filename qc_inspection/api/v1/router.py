from fastapi import APIRouter

from qc_inspection.api.v1.endpoints import (
    auth,
    parts,
    reports,
    compliance,
    users,
)


api_router = APIRouter(prefix="/api/v1")

# ==================== Authentication ====================
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"]
)

# ==================== Parts ====================
api_router.include_router(
    parts.router,
    prefix="/parts",
    tags=["Parts"]
)

# ==================== Inspection Reports ====================
api_router.include_router(
    reports.router,
    prefix="/reports",
    tags=["Inspection Reports"]
)

# ==================== Compliance ====================
api_router.include_router(
    compliance.router,
    prefix="/compliance",
    tags=["Compliance"]
)

# ==================== Users ====================
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"]
)
