"""
Part Service.

Create, update and delete part definitions. Quality Head only.

A part needs a part number, name, customer and at least one characteristic
whose name, specification and check method are all filled in. Part numbers
are unique: they are the key reports are correlated by, while the storage id
stays opaque.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from qc_inspection.core.exceptions import NotFound, ValidationFailed
from qc_inspection.core.permissions import RoleChecker
from qc_inspection.models.inspection import Role
from qc_inspection.schemas.part import CharacteristicSpec, Part, PartCreate, PartUpdate
from qc_inspection.schemas.user import User
from qc_inspection.services.document_utils import apply_store_operation, parse_documents
from qc_inspection.store import DocumentStore, PARTS


logger = logging.getLogger(__name__)


def validate_characteristic(spec: CharacteristicSpec) -> None:
    if not (spec.name.strip() and spec.specification.strip() and spec.check_method.strip()):
        raise ValidationFailed(
            "Please fill in all characteristic fields.",
            error_code="CHARACTERISTIC_INCOMPLETE",
            details={"characteristic": spec.name},
        )


def validate_part_fields(part_no: str, part_name: str, customer: str, characteristics: List[CharacteristicSpec]) -> None:
    """Raise ValidationFailed unless every required part field is present."""
    missing = [
        field for field, value in (
            ("partNo", part_no), ("partName", part_name), ("customer", customer),
        )
        if not (value or "").strip()
    ]
    if missing or not characteristics:
        raise ValidationFailed(
            "All fields and at least one characteristic must be filled out.",
            error_code="PART_INCOMPLETE",
            details={"missing": missing + ([] if characteristics else ["characteristics"])},
        )
    for spec in characteristics:
        validate_characteristic(spec)


class PartService:
    """Service for part definition management."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_parts(self) -> List[Part]:
        return parse_documents(Part, await self.store.list(PARTS), "part")

    async def get_part(self, part_id: str) -> Part:
        document = await self.store.get(PARTS, part_id)
        if document is None:
            raise NotFound(f"Part {part_id} not found", details={"part_id": part_id})
        return Part.model_validate(document)

    async def _ensure_unique_part_no(self, part_no: str, exclude_id: Optional[str] = None) -> None:
        for part in await self.list_parts():
            if part.part_no == part_no and part.id != exclude_id:
                raise ValidationFailed(
                    f"Part number {part_no} already exists.",
                    error_code="DUPLICATE_PART_NO",
                    details={"part_no": part_no, "part_id": part.id},
                )

    async def create_part(self, actor: Optional[User], data: PartCreate) -> Part:
        """Create a part."""
        user = RoleChecker(actor).require_role(Role.QUALITY_HEAD)
        validate_part_fields(data.part_no, data.part_name, data.customer, data.characteristics)
        await self._ensure_unique_part_no(data.part_no)

        document = data.to_document()
        document["createdAt"] = datetime.now(timezone.utc)
        part_id = await apply_store_operation(self.store.add(PARTS, document), "add part")
        logger.info(f"Part {data.part_no} created as {part_id} by {user.id}")
        return await self.get_part(part_id)

    async def update_part(self, actor: Optional[User], part_id: str, data: PartUpdate) -> Part:
        """
        Update a part.

        Existing reports are unaffected: each keeps the characteristics it
        was created with.
        """
        user = RoleChecker(actor).require_role(Role.QUALITY_HEAD)
        current = await self.get_part(part_id)

        merged = Part.model_validate({**current.model_dump(), **data.model_dump(exclude_unset=True)})
        validate_part_fields(merged.part_no, merged.part_name, merged.customer, merged.characteristics)
        if merged.part_no != current.part_no:
            await self._ensure_unique_part_no(merged.part_no, exclude_id=part_id)

        fields = data.to_update()
        fields["lastUpdated"] = datetime.now(timezone.utc)
        await apply_store_operation(self.store.update(PARTS, part_id, fields), "update part")
        logger.info(f"Part {part_id} ({merged.part_no}) updated by {user.id}")
        return await self.get_part(part_id)

    async def delete_part(self, actor: Optional[User], part_id: str) -> None:
        """Delete a part. Reports that reference it are kept."""
        user = RoleChecker(actor).require_role(Role.QUALITY_HEAD)
        part = await self.get_part(part_id)
        await apply_store_operation(self.store.delete(PARTS, part_id), "delete part")
        logger.info(f"Part {part_id} ({part.part_no}) deleted by {user.id}")

