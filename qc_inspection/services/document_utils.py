"""Helpers shared by the services for reading and writing store documents."""
import logging
from typing import Awaitable, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from qc_inspection.core.exceptions import InspectionError, StoreError


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
R = TypeVar("R")


def parse_documents(model: Type[M], documents: List[dict], kind: str) -> List[M]:
    """Validate stored documents, skipping (and logging) unreadable ones."""
    parsed = []
    for document in documents:
        try:
            parsed.append(model.model_validate(document))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable {kind} document {document.get('id')}: {e.error_count()} error(s)")
    return parsed


async def apply_store_operation(operation: Awaitable[R], description: str) -> R:
    """
    Await a store write.

    Domain errors (NotFound, ConcurrentUpdateError) pass through; anything
    else the store raises is reported as StoreError. No retries.
    """
    try:
        return await operation
    except InspectionError:
        raise
    except Exception as e:
        logger.error(f"Failed to {description}: {e}")
        raise StoreError(f"Failed to {description}.", details={"reason": str(e)}) from e
