# app/board/registry.py
import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Generic, Iterator, TypeVar

from app.board.errors import GatewayError, UnknownEntityError
from app.board.events import EventSource
from app.board.gateway import EntityGateway
from app.board.notices import LogNotifier, Notifier
from app.board import ordering

logger = logging.getLogger(__name__)

E = TypeVar("E")


class UpdatePolicy(str, Enum):
    """What a failed field update does to the local mirror."""

    NO_ROLLBACK = "optimistic-no-rollback"
    ROLLBACK_ON_FAILURE = "optimistic-rollback-on-failure"


class Registry(EventSource, Generic[E]):
    """Ordered in-memory mirror of one entity collection.

    Mutations are applied locally first, then persisted through the gateway.
    Persistence failures are logged and reported to the notifier; the mirror
    is only restored for field updates under ``ROLLBACK_ON_FAILURE``.
    """

    kind = "item"

    def __init__(
        self,
        gateway: EntityGateway,
        notifier: Notifier | None = None,
        policy: UpdatePolicy = UpdatePolicy.NO_ROLLBACK,
    ):
        super().__init__()
        self.gateway = gateway
        self.notifier = notifier or LogNotifier()
        self.policy = UpdatePolicy(policy)
        self._items: list[E] = []

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> tuple[E, ...]:
        return tuple(self._items)

    def get(self, entity_id) -> E | None:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def require(self, entity_id) -> E:
        item = self.get(entity_id)
        if item is None:
            raise UnknownEntityError(self.kind.capitalize(), entity_id)
        return item

    def index_of(self, entity_id) -> int:
        try:
            return ordering.position_of(self._items, entity_id)
        except KeyError:
            return -1

    def _report(self, action: str, exc: Exception) -> None:
        logger.error("Error while trying to %s: %s", action, exc)
        self.notifier.error(f"Failed to {action}.")

    async def _call(self, action: str, call: Awaitable[Any]) -> bool:
        try:
            await call
        except GatewayError as exc:
            self._report(action, exc)
            return False
        return True

    async def _join(self, calls: list[tuple[str, Awaitable[Any]]]) -> list[str]:
        """Run independent persistence calls concurrently; return the failed actions."""
        if not calls:
            return []
        results = await asyncio.gather(*(call for _, call in calls), return_exceptions=True)
        failed = []
        for (action, _), result in zip(calls, results):
            if isinstance(result, GatewayError):
                self._report(action, result)
                failed.append(action)
            elif isinstance(result, BaseException):
                raise result
        return failed

    def _order_calls(self, changed: list[E]) -> list[tuple[str, Awaitable[Any]]]:
        return [
            (f"reorder {self.kind} {item.id}", self.gateway.update(item.id, {"order_index": item.order_index}))
            for item in changed
        ]

    async def _apply(self, item: E, fields: dict[str, Any], event: str = "updated") -> bool:
        previous = {name: getattr(item, name) for name in fields}
        for name, value in fields.items():
            setattr(item, name, value)
        self.emit(event, item)

        ok = await self._call(f"update {self.kind}", self.gateway.update(item.id, fields))
        if not ok and self.policy is UpdatePolicy.ROLLBACK_ON_FAILURE:
            restored = False
            for name, value in previous.items():
                # a newer local edit wins over the rollback
                if getattr(item, name) == fields[name]:
                    setattr(item, name, value)
                    restored = True
            if restored:
                self.emit(event, item)
        return ok

    async def _move(self, entity_id, to_index: int) -> list[str]:
        self.require(entity_id)
        changed = ordering.move(self._items, entity_id, to_index)
        if not changed:
            return []
        self.emit("moved", self.get(entity_id))
        return await self._join(self._order_calls(changed))

    async def _repair_order(self) -> None:
        changed = ordering.reindex(self._items)
        if changed:
            logger.warning("Repairing order of %d %s(s) loaded out of sequence", len(changed), self.kind)
            await self._join(self._order_calls(changed))
