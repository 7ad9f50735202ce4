from typing import List

from fastapi import APIRouter, status

from qc_inspection.api.deps import CurrentUser, Parts
from qc_inspection.core.permissions import RoleChecker
from qc_inspection.schemas.part import Part, PartCreate, PartUpdate

router = APIRouter(tags=["Parts"])


@router.get("", response_model=List[Part])
async def list_parts(parts: Parts, current_user: CurrentUser):
    """List part definitions."""
    RoleChecker(current_user).require_authenticated()
    return await parts.list_parts()


@router.post("", response_model=Part, status_code=status.HTTP_201_CREATED)
async def create_part(data: PartCreate, parts: Parts, current_user: CurrentUser):
    """Create a part. Quality Head only."""
    return await parts.create_part(current_user, data)


@router.get("/{part_id}", response_model=Part)
async def get_part(part_id: str, parts: Parts, current_user: CurrentUser):
    RoleChecker(current_user).require_authenticated()
    return await parts.get_part(part_id)


@router.put("/{part_id}", response_model=Part)
async def update_part(part_id: str, data: PartUpdate, parts: Parts, current_user: CurrentUser):
    """Update a part. Reports already created from it are not changed."""
    return await parts.update_part(current_user, part_id, data)


@router.delete("/{part_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_part(part_id: str, parts: Parts, current_user: CurrentUser):
    """Delete a part. Quality Head only."""
    await parts.delete_part(current_user, part_id)
