"""
In-memory collections owned by a session.

Only the SyncCoordinator writes to these; everything else reads snapshots.
"""

from typing import Callable, Generic, Iterator, TypeVar

from pydantic import BaseModel

from gated.models.drop import DropEntity
from gated.models.garment import GarmentEntity
from gated.models.notice import Notice
from gated.models.order import OrderEntity

EntityT = TypeVar("EntityT", bound=BaseModel)


class EntityCollection(Generic[EntityT]):
    """Ordered list of entities, newest first."""

    def __init__(self, kind: str):
        self.kind = kind
        self._items: list[EntityT] = []

    @property
    def items(self) -> tuple[EntityT, ...]:
        """Immutable snapshot of the current contents."""
        return tuple(self._items)

    def apply(self, transform: Callable[[list[EntityT]], list[EntityT]]) -> None:
        """Replace contents with transform(current contents)."""
        self._items = transform(list(self._items))

    def clear(self) -> None:
        self._items = []

    def __contains__(self, entity_id: object) -> bool:
        return any(item.id == entity_id for item in self._items)

    def __iter__(self) -> Iterator[EntityT]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self._items)


class SessionStore:
    """
    The three collections of a signed-in user plus pending notices.

    The epoch changes every time the store is reset; results of remote calls
    issued under an older epoch must be discarded.
    """

    def __init__(self):
        self.garments: EntityCollection[GarmentEntity] = EntityCollection("garments")
        self.orders: EntityCollection[OrderEntity] = EntityCollection("orders")
        self.drops: EntityCollection[DropEntity] = EntityCollection("drops")
        self.epoch = 0
        self._notices: list[Notice] = []

    def add_notice(self, notice: Notice) -> None:
        self._notices.append(notice)

    def drain_notices(self) -> list[Notice]:
        """Return pending notices and forget them (each is shown once)."""
        notices, self._notices = self._notices, []
        return notices

    def reset(self) -> int:
        """Clear everything and start a new epoch."""
        self.epoch += 1
        self.garments.clear()
        self.orders.clear()
        self.drops.clear()
        self._notices = []
        return self.epoch
