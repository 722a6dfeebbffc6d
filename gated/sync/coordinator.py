"""
Optimistic synchronization between session collections and the remote store.

Each create/delete applies its local mutation synchronously, then schedules
the remote call as a task on the running event loop. When the call resolves
the coordinator either reconciles the temporary id or rolls the entry back.
Results issued under an older session epoch are discarded.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from gated.db.remote_store import RemoteStore
from gated.errors import SchemaError
from gated.models.drop import DropEntity
from gated.models.garment import GarmentEntity
from gated.models.notice import Notice, NoticeLevel
from gated.models.order import OrderEntity
from gated.models.rows import StoreRow
from gated.sync import mappers
from gated.sync.collection import EntityCollection, SessionStore
from gated.sync.reconciler import (
    ReconcileOutcome,
    is_temporary_id,
    new_temporary_id,
    prepend,
    reconcile,
    remove,
)
from gated.sync.result import Err, Ok, Result
from gated.utils.logging import json_fields

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)

# Singular labels used in notices
ENTITY_LABELS = {"garments": "garment", "orders": "order", "drops": "drop"}


class _LoadWindow:
    """Ids confirmed or deleted locally while a select is outstanding."""

    def __init__(self, deleted: set[str]):
        self.confirmed: set[str] = set()
        self.deleted = deleted


class CollectionSync(Generic[EntityT]):
    """Optimistic create/delete for one collection."""

    def __init__(
        self,
        coordinator: "SyncCoordinator",
        collection: EntityCollection[EntityT],
        to_row: Callable[[EntityT, Optional[str]], dict],
        from_row: Callable[[dict], EntityT],
    ):
        self._coordinator = coordinator
        self.collection = collection
        self.table = collection.kind
        self._to_row = to_row
        self._from_row = from_row
        # Temporary ids the user deleted before their insert was confirmed
        self._abandoned: set[str] = set()
        # Server ids with a remote delete in flight
        self._deleting: set[str] = set()
        self._windows: list[_LoadWindow] = []

    @property
    def items(self) -> tuple[EntityT, ...]:
        return self.collection.items

    @property
    def label(self) -> str:
        return ENTITY_LABELS.get(self.table, self.table)

    def create(self, entity: EntityT) -> asyncio.Task:
        """
        Add entity to the front of the collection and persist it.

        The entity is visible as soon as this returns. The returned task
        resolves to Ok(confirmed entity) or Err(reason).

        Args:
            entity: Fully-formed entity; a temporary id is minted if it has none

        Returns:
            Task for the outstanding remote insert
        """
        if entity.id is None:
            entity = entity.model_copy(update={"id": new_temporary_id()})

        epoch = self._coordinator.epoch
        self.collection.apply(lambda items: prepend(items, entity))
        logger.info("Optimistic create in %s: %s", self.table, entity.id)

        return self._coordinator.spawn(self._confirm_create(entity, epoch))

    def delete(self, entity_id: str) -> Optional[asyncio.Task]:
        """
        Remove an entity locally and delete it remotely, best effort.

        Deleting an id that is not present is a no-op and returns None. A failed
        remote delete is reported but never re-adds the entity.

        Args:
            entity_id: Identifier of the entity to remove

        Returns:
            Task for the outstanding remote delete, or None
        """
        if entity_id not in self.collection:
            logger.debug("Delete in %s: %s not present", self.table, entity_id)
            return None

        self.collection.apply(lambda items: remove(items, entity_id))
        logger.info("Deleted from %s: %s", self.table, entity_id)

        if is_temporary_id(entity_id):
            # Never reached the store yet; the pending create cleans up
            self._abandoned.add(entity_id)
            return None

        self._mark_deleted(entity_id)
        return self._coordinator.spawn(
            self._remote_delete(entity_id, self._coordinator.epoch)
        )

    def _mark_deleted(self, entity_id: str) -> None:
        self._deleting.add(entity_id)
        for window in self._windows:
            window.deleted.add(entity_id)

    async def _confirm_create(self, entity: EntityT, epoch: int) -> Result:
        temporary_id = entity.id
        row = self._to_row(entity, self._coordinator.owner_id)
        result = await self._coordinator.call(
            self._coordinator.remote.insert(self.table, row)
        )

        if result.ok:
            try:
                server_id = StoreRow.model_validate(result.value).id
            except ValidationError as e:
                result = Err(SchemaError.from_validation(f"{self.table} insert", e))

        if self._coordinator.is_stale(epoch):
            logger.info(
                "Discarding %s create result for %s: session ended",
                self.table,
                temporary_id,
            )
            if temporary_id in self._abandoned:
                self._abandoned.discard(temporary_id)
                if result.ok:
                    self._mark_deleted(server_id)
                    self._coordinator.spawn(self._remote_delete(server_id, epoch))
            return result

        if not result.ok:
            abandoned = temporary_id in self._abandoned
            self._abandoned.discard(temporary_id)
            self.collection.apply(lambda items: remove(items, temporary_id))
            logger.warning(
                "Create in %s failed, rolled back %s: %s",
                self.table,
                temporary_id,
                result.reason,
                extra=json_fields(table=self.table, id=temporary_id),
            )
            if not abandoned:
                self._coordinator.notify(
                    f"Could not save {self.label}: {result.reason}",
                    entity_kind=self.table,
                    entity_id=temporary_id,
                )
            return result

        confirmed = entity.model_copy(update={"id": server_id})
        # No await between read and write: this sees the latest state
        items, outcome = reconcile(self.collection.items, temporary_id, confirmed)
        self.collection.apply(lambda _: items)

        if outcome is ReconcileOutcome.RACE_NO_OP:
            logger.info(
                "%s %s was removed before confirmation (server id %s)",
                self.label,
                temporary_id,
                server_id,
            )
            if temporary_id in self._abandoned:
                self._abandoned.discard(temporary_id)
                # The user deleted it while in flight; delete the stored row too
                self._mark_deleted(server_id)
                self._coordinator.spawn(self._remote_delete(server_id, epoch))
        else:
            logger.info("Confirmed %s: %s -> %s", self.table, temporary_id, server_id)
            for window in self._windows:
                window.confirmed.add(server_id)

        return Ok(confirmed)

    async def _remote_delete(self, entity_id: str, epoch: int) -> Result:
        try:
            result = await self._coordinator.call(
                self._coordinator.remote.delete(self.table, entity_id)
            )
        finally:
            self._deleting.discard(entity_id)
        if not result.ok:
            logger.warning(
                "Remote delete in %s failed for %s: %s",
                self.table,
                entity_id,
                result.reason,
                extra=json_fields(table=self.table, id=entity_id),
            )
            if not self._coordinator.is_stale(epoch):
                self._coordinator.notify(
                    f"Could not delete {self.label} from the server: {result.reason}",
                    entity_kind=self.table,
                    entity_id=entity_id,
                )
        return result

    async def load(self, epoch: int) -> Result:
        """
        Replace confirmed entries with the store's rows, keeping pending ones.

        The select may snapshot before writes that land while it runs, so
        entries confirmed during the load are kept and rows deleted during it
        are dropped from the result.
        """
        window = _LoadWindow(deleted=set(self._deleting))
        self._windows.append(window)
        try:
            result = await self._coordinator.call(
                self._coordinator.remote.select(self.table, self._coordinator.owner_id)
            )
        finally:
            self._windows.remove(window)

        if self._coordinator.is_stale(epoch):
            return result
        if not result.ok:
            logger.warning("Reload of %s failed: %s", self.table, result.reason)
            self._coordinator.notify(
                f"Could not load {self.table}: {result.reason}", entity_kind=self.table
            )
            return result

        loaded: list[EntityT] = []
        for row in result.value:
            try:
                loaded.append(self._from_row(row))
            except SchemaError as e:
                logger.warning("Skipping %s row %s: %s", self.table, row.get("id"), e)

        def merge(items: list[EntityT]) -> list[EntityT]:
            kept = [
                item
                for item in items
                if is_temporary_id(item.id) or item.id in window.confirmed
            ]
            kept_ids = {item.id for item in kept}
            fresh = [
                entity
                for entity in loaded
                if entity.id not in kept_ids and entity.id not in window.deleted
            ]
            return kept + fresh

        self.collection.apply(merge)
        logger.info("Loaded %d %s", len(loaded), self.table)
        return Ok(loaded)


class SyncCoordinator:
    """
    Owns the optimistic create/delete paths for garments, orders and drops.

    Usage:
        coordinator = SyncCoordinator(SessionStore(), SqlRemoteStore(), owner_id)
        task = coordinator.garments.create(garment)   # visible immediately
        result = await task                            # Ok(confirmed) or Err
    """

    def __init__(self, store: SessionStore, remote: RemoteStore, owner_id: str):
        self.store = store
        self.remote = remote
        self.owner_id = owner_id
        self._pending: set[asyncio.Task] = set()

        self.garments: CollectionSync[GarmentEntity] = CollectionSync(
            self, store.garments, mappers.garment_to_row, mappers.garment_from_row
        )
        self.orders: CollectionSync[OrderEntity] = CollectionSync(
            self, store.orders, mappers.order_to_row, mappers.order_from_row
        )
        self.drops: CollectionSync[DropEntity] = CollectionSync(
            self, store.drops, mappers.drop_to_row, mappers.drop_from_row
        )

    @property
    def epoch(self) -> int:
        return self.store.epoch

    @property
    def pending(self) -> int:
        """Number of outstanding remote calls."""
        return len(self._pending)

    def is_stale(self, epoch: int) -> bool:
        return epoch != self.store.epoch

    def collection_sync(self, kind: str) -> CollectionSync:
        """CollectionSync for 'garments', 'orders' or 'drops'."""
        if kind not in ENTITY_LABELS:
            raise KeyError(f"Unknown collection: {kind}")
        return getattr(self, kind)

    def spawn(self, coro: Awaitable[Result]) -> asyncio.Task:
        """Schedule coro on the running loop and keep a reference until done."""
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def call(self, operation: Awaitable[Any]) -> Result:
        """Await a remote operation and fold its outcome into a Result."""
        try:
            return Ok(await operation)
        except Exception as e:
            logger.debug("Remote call failed", exc_info=True)
            return Err(e)

    def notify(
        self,
        message: str,
        entity_kind: Optional[str] = None,
        entity_id: Optional[str] = None,
        level: NoticeLevel = NoticeLevel.WARNING,
    ) -> None:
        self.store.add_notice(
            Notice(
                level=level,
                message=message,
                entity_kind=entity_kind,
                entity_id=entity_id,
            )
        )

    async def refresh(self) -> None:
        """Full reload of all three collections from the store."""
        # A committed but unreconciled insert would otherwise load twice
        await self.wait_idle()
        epoch = self.epoch
        for sync in (self.garments, self.orders, self.drops):
            await sync.load(epoch)
            if self.is_stale(epoch):
                logger.info("Reload abandoned: session ended")
                return

    async def wait_idle(self) -> None:
        """Wait until every outstanding remote call has resolved."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
