# app/board/steps.py
import logging
from typing import Any, Awaitable, Protocol

from app.board import ordering
from app.board.entities import Step
from app.board.errors import GatewayError
from app.board.registry import Registry

logger = logging.getLogger(__name__)

DRAG_AXIS = ordering.Axis.VERTICAL


class StepDependent(Protocol):
    def release_step(self, step_id: int) -> list[tuple[str, Awaitable[Any]]]: ...


class StepRegistry(Registry[Step]):
    """Ordered workflow steps.

    Events: ``loaded``, ``created``, ``renamed``, ``moved`` and ``deleted``
    (the payload of ``deleted`` is the removed step).
    """

    kind = "step"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._dependents: list[StepDependent] = []

    def add_dependent(self, dependent: StepDependent) -> None:
        """Register a collection whose references must be cleared when a step goes away."""
        self._dependents.append(dependent)

    @property
    def first(self) -> Step | None:
        return self._items[0] if self._items else None

    def label(self, step: Step) -> str:
        if step.name:
            return step.name
        return f"Step {self.index_of(step.id) + 1}"

    async def load(self) -> None:
        records = await self.gateway.list_all()
        steps = [Step.from_payload(record) for record in records]
        self._items = sorted(steps, key=lambda step: (step.order_index, step.id))
        await self._repair_order()
        self.emit("loaded", self.items)

    async def create(self, name: str = "") -> Step | None:
        fields = {"name": name.strip(), "order_index": len(self._items)}
        try:
            record = await self.gateway.create(fields)
        except GatewayError as exc:
            self._report("add step", exc)
            return None
        step = Step.from_payload(record)
        ordering.append(self._items, step)
        self.emit("created", step)
        return step

    async def rename(self, step_id: int, name: str) -> bool:
        step = self.require(step_id)
        return await self._apply(step, {"name": name.strip()}, event="renamed")

    async def rename_many(self, names: dict[int, str]) -> list[str]:
        renames = [(self.require(step_id), name.strip()) for step_id, name in names.items()]
        calls = []
        for step, name in renames:
            if step.name == name:
                continue
            step.name = name
            self.emit("renamed", step)
            calls.append((f"update step {step.id}", self.gateway.update(step.id, {"name": name})))
        return await self._join(calls)

    async def delete(self, step_id: int) -> list[str]:
        """Remove a step and clear every reference to it.

        References are cleared locally before the ``deleted`` event. The
        delete, the re-walk of the remaining indices and the cascade are then
        persisted concurrently; each failure is reported on its own.
        """
        self.require(step_id)
        step, changed = ordering.remove_dense(self._items, step_id)
        cascade = [call for dependent in self._dependents for call in dependent.release_step(step_id)]
        self.emit("deleted", step)
        return await self._join(
            [(f"delete step {step_id}", self.gateway.delete(step_id))] + self._order_calls(changed) + cascade
        )

    async def move(self, step_id: int, to_index: int) -> list[str]:
        return await self._move(step_id, to_index)

    async def move_by_delta(self, step_id: int, delta: int) -> list[str]:
        index = self.index_of(step_id)
        if index < 0:
            self.require(step_id)
        target = index + delta
        if target < 0 or target >= len(self._items):
            return []
        return await self._move(step_id, target)

    async def drop(self, step_id: int, target_id: int, pointer: tuple[float, float], target_rect: ordering.Rect) -> list[str]:
        to_index = ordering.drop_index(self._items, step_id, target_id, pointer, target_rect, DRAG_AXIS)
        return await self._move(step_id, to_index)

    async def restore(self, snapshot: dict) -> Step | None:
        """Re-create a deleted step under a new id at its former position."""
        step = await self.create(snapshot.get("name", ""))
        if step is not None:
            await self._move(step.id, snapshot.get("order_index", step.order_index))
        return step
