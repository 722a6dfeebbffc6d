"""
Optimistic synchronization layer.

Keeps in-memory collections consistent with the remote store: local mutations
apply immediately, remote confirmations reconcile temporary ids, failures roll
back.
"""

from gated.sync.collection import EntityCollection, SessionStore
from gated.sync.coordinator import CollectionSync, SyncCoordinator
from gated.sync.reconciler import (
    ReconcileOutcome,
    is_temporary_id,
    new_temporary_id,
    reconcile,
)
from gated.sync.result import Err, Ok, Result
from gated.sync.session import Session, SessionRegistry

__all__ = [
    "CollectionSync",
    "EntityCollection",
    "Err",
    "Ok",
    "ReconcileOutcome",
    "Result",
    "Session",
    "SessionRegistry",
    "SessionStore",
    "SyncCoordinator",
    "is_temporary_id",
    "new_temporary_id",
    "reconcile",
]
