"""
Identity reconciliation for optimistic collections.

Every function here is a pure transform: it takes the current list of entities
and returns a new one. Callers apply the transform to the latest collection
state, never to a snapshot captured before an await.
"""

import logging
import uuid
from enum import StrEnum
from typing import Sequence, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)

TEMPORARY_ID_PREFIX = "tmp-"


class ReconcileOutcome(StrEnum):
    """What reconcile() did to the collection"""

    RECONCILED = "reconciled"  # Temporary entry replaced in place
    RACE_NO_OP = "race_no_op"  # Temporary entry gone (deleted while in flight)


def new_temporary_id() -> str:
    """Mint a client-side identifier valid until server confirmation."""
    return f"{TEMPORARY_ID_PREFIX}{uuid.uuid4().hex}"


def is_temporary_id(entity_id: str | None) -> bool:
    return bool(entity_id) and entity_id.startswith(TEMPORARY_ID_PREFIX)


def prepend(items: Sequence[EntityT], entity: EntityT) -> list[EntityT]:
    """Put entity at the front, dropping any entry already holding its id."""
    return [entity] + [item for item in items if item.id != entity.id]


def remove(items: Sequence[EntityT], entity_id: str) -> list[EntityT]:
    """Drop every entry with the given id."""
    return [item for item in items if item.id != entity_id]


def reconcile(
    items: Sequence[EntityT],
    temporary_id: str,
    confirmed: EntityT,
) -> tuple[list[EntityT], ReconcileOutcome]:
    """
    Swap the entry carrying temporary_id for confirmed, preserving position.

    If the temporary entry is no longer present the collection is returned
    unchanged: a confirmation that arrives after a delete loses to the delete.

    Args:
        items: Current collection contents
        temporary_id: Client-minted id the entry was created with
        confirmed: Entity carrying the server-assigned id

    Returns:
        Tuple of (new collection, outcome)
    """
    position = next(
        (index for index, item in enumerate(items) if item.id == temporary_id),
        None,
    )
    if position is None:
        logger.debug("Reconcile target %s no longer present", temporary_id)
        return list(items), ReconcileOutcome.RACE_NO_OP

    result: list[EntityT] = []
    for index, item in enumerate(items):
        if index == position:
            result.append(confirmed)
        elif item.id != confirmed.id:
            result.append(item)
    return result, ReconcileOutcome.RECONCILED
