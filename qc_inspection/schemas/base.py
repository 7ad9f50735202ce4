"""
Base Schema Classes for Pydantic Models

Stored documents use camelCase keys (partNo, submittedBy, lastUpdatedBy...).
Python code uses snake_case attributes. These base classes bridge the two so
every schema reads a raw store document and dumps back to the same shape.

RULE: Dump with `by_alias=True` whenever the output goes back to the store
or out to an exporter.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentSchema(BaseModel):
    """
    Base class for records read from the document store.

    Features:
    - snake_case attributes, camelCase aliases
    - Population by field name or alias
    - Unknown stored keys are ignored (older documents carry extra fields)

    Usage:
        class Part(DocumentSchema):
            part_no: str        # stored as "partNo"
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    def to_document(self) -> dict:
        """Dump in store shape (camelCase keys)."""
        return self.model_dump(by_alias=True)


class BaseCreateSchema(DocumentSchema):
    """
    Base class for create/input schemas.

    Required-field checks are done by the services so that missing input
    surfaces as ValidationFailed rather than a schema error.
    """


class BaseUpdateSchema(DocumentSchema):
    """
    Base class for update/patch schemas.

    All fields are optional by default for partial updates.
    """

    def to_update(self) -> dict:
        """Only the fields the caller actually set, in store shape."""
        return self.model_dump(by_alias=True, exclude_unset=True)
