"""
Part Schemas.

A part owns an ordered list of characteristic templates. `id` is the opaque
storage key; `part_no` is the business key reports are correlated by.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from qc_inspection.schemas.base import DocumentSchema, BaseCreateSchema, BaseUpdateSchema


class CharacteristicSpec(DocumentSchema):
    """Characteristic template, e.g. specification "2x 155.5 ± 0.2"."""
    name: str = ""
    specification: str = ""
    check_method: str = ""

    @field_validator("name", "specification", "check_method", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        return "" if v is None else v


class PartBase(DocumentSchema):
    part_no: str = ""
    part_name: str = ""
    customer: str = ""
    characteristics: List[CharacteristicSpec] = Field(default_factory=list)

    @field_validator("part_no", "part_name", "customer", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        return "" if v is None else v

    @field_validator("characteristics", mode="before")
    @classmethod
    def empty_if_none(cls, v):
        return [] if v is None else v


class PartCreate(PartBase, BaseCreateSchema):
    """Schema for creating a part."""


class PartUpdate(BaseUpdateSchema):
    """Schema for updating a part. Unset fields are left untouched."""
    part_no: Optional[str] = None
    part_name: Optional[str] = None
    customer: Optional[str] = None
    characteristics: Optional[List[CharacteristicSpec]] = None


class Part(PartBase):
    """Part as stored."""
    id: str
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class PartSummary(DocumentSchema):
    """Part identity used by the compliance grid rows."""
    id: str
    part_no: str
    part_name: str = ""
    customer: str = ""
