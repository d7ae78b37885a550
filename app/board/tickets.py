# app/board/tickets.py
import logging
from enum import Enum
from typing import Any, Awaitable

from app.board import ordering
from app.board.debounce import KeyedDebouncer
from app.board.entities import TICKET_FIELDS, Ticket
from app.board.errors import BoardValidationError, GatewayError
from app.board.numbering import NumberingPolicy, validate_number
from app.board.registry import Registry
from app.board.steps import StepRegistry
from app.ticket.colors import DEFAULT_COLOR, is_custom_color, normalize_color

logger = logging.getLogger(__name__)

DRAG_AXIS = ordering.Axis.HORIZONTAL
NO_STEP_LABEL = "No step"

# default for create(): the first step of the sequence, if any
FIRST_STEP = object()


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class TicketRegistry(Registry[Ticket]):
    """Ordered tickets, their numbers and their step assignments.

    Events: ``loaded``, ``created``, ``updated``, ``notes``, ``moved`` and
    ``deleted`` (payload: the removed ticket, or a list for bulk deletes).
    """

    kind = "ticket"

    def __init__(
        self,
        gateway,
        steps: StepRegistry,
        numbering: NumberingPolicy | None = None,
        notifier=None,
        policy=None,
        notes_delay: float = 0.4,
    ):
        kwargs = {} if policy is None else {"policy": policy}
        super().__init__(gateway, notifier, **kwargs)
        self.steps = steps
        self.numbering = numbering or NumberingPolicy()
        self._notes = KeyedDebouncer(notes_delay)
        steps.add_dependent(self)

    async def load(self) -> None:
        # pending note saves still carry user input
        await self._notes.drain()
        records = await self.gateway.list_all()
        tickets = [Ticket.from_payload(record) for record in records]
        self._items = sorted(tickets, key=lambda ticket: (ticket.order_index, ticket.id))
        self.numbering.track(ticket.ticket_number for ticket in self._items)
        await self._repair_order()
        self.emit("loaded", self.items)

    def step_label(self, ticket: Ticket) -> str:
        step = self.steps.get(ticket.current_step_id) if ticket.current_step_id is not None else None
        return self.steps.label(step) if step else NO_STEP_LABEL

    def _check_step(self, step_id: int | None) -> None:
        if step_id is not None and self.steps.get(step_id) is None:
            raise BoardValidationError(f"Step {step_id} does not exist")

    async def create(
        self,
        number: int | None = None,
        color: str = DEFAULT_COLOR,
        notes: str = "",
        step_id: Any = FIRST_STEP,
        index: int | None = None,
    ) -> Ticket | None:
        color = self._color(color)
        if step_id is FIRST_STEP:
            first = self.steps.first
            step_id = first.id if first else None
        self._check_step(step_id)
        number = self.numbering.next_number() if number is None else self.numbering.claim(number)

        position = len(self._items) if index is None else max(0, min(index, len(self._items)))
        fields = {
            "ticket_number": number,
            "color": color,
            "notes": notes,
            "current_step_id": step_id,
            "order_index": position,
        }
        try:
            record = await self.gateway.create(fields)
        except GatewayError as exc:
            if not any(ticket.ticket_number == number for ticket in self._items):
                self.numbering.release(number)
            self._report("add ticket", exc)
            return None

        ticket = Ticket.from_payload(record)
        ticket.order_index = position
        changed = ordering.insert(self._items, ticket, position)
        self.emit("created", ticket)
        await self._join(self._order_calls(changed))
        return ticket

    async def update(self, ticket_id: int, **fields) -> bool:
        """Apply fields locally, then persist them.

        Returns ``False`` when persistence failed; the local values stay
        unless the registry uses the rollback policy.
        """
        unknown = set(fields) - set(TICKET_FIELDS)
        if unknown:
            raise BoardValidationError(f"Unknown ticket field(s): {', '.join(sorted(unknown))}")
        ticket = self.require(ticket_id)
        if "color" in fields:
            fields["color"] = self._color(fields["color"])
        if "current_step_id" in fields:
            self._check_step(fields["current_step_id"])
        old_number = ticket.ticket_number
        new_number = fields.get("ticket_number", old_number)
        if "ticket_number" in fields:
            validate_number(new_number)
            if new_number != old_number:
                self.numbering.reassign(old_number, new_number)
        # positions only change through the dense re-walk
        to_index = fields.pop("order_index", None)
        ok = True
        if fields:
            ok = await self._apply(ticket, fields)
        if not ok and new_number != old_number and ticket.ticket_number == old_number:
            self.numbering.reassign(new_number, old_number)
        if to_index is not None:
            ok = not await self._move(ticket_id, to_index) and ok
        return ok

    def update_notes_debounced(self, ticket_id: int, text: str) -> None:
        ticket = self.require(ticket_id)
        ticket.notes = text
        self.emit("notes", ticket)
        self._notes.schedule(ticket_id, lambda: self._save_notes(ticket_id))

    async def _save_notes(self, ticket_id: int) -> None:
        ticket = self.get(ticket_id)
        if ticket is None:
            return
        await self._call("update ticket", self.gateway.update(ticket_id, {"notes": ticket.notes}))

    def has_pending_notes(self, ticket_id: int) -> bool:
        return self._notes.is_pending(ticket_id)

    async def drain_notes(self) -> None:
        await self._notes.drain()

    async def delete(self, ticket_id: int) -> list[str]:
        self.require(ticket_id)
        self._notes.cancel(ticket_id)
        ticket, changed = ordering.remove_dense(self._items, ticket_id)
        self.emit("deleted", ticket)
        return await self._join(
            [(f"delete ticket {ticket_id}", self.gateway.delete(ticket_id))] + self._order_calls(changed)
        )

    async def delete_many(self, ticket_ids) -> list[str]:
        ids = list(dict.fromkeys(ticket_ids))
        for ticket_id in ids:
            self.require(ticket_id)
        removed = []
        for ticket_id in ids:
            self._notes.cancel(ticket_id)
            removed.append(self._items.pop(ordering.position_of(self._items, ticket_id)))
        changed = ordering.reindex(self._items)
        self.emit("deleted", removed)
        calls = [(f"delete ticket {ticket_id}", self.gateway.delete(ticket_id)) for ticket_id in ids]
        return await self._join(calls + self._order_calls(changed))

    async def move(self, ticket_id: int, to_index: int) -> list[str]:
        return await self._move(ticket_id, to_index)

    async def drop(self, ticket_id: int, target_id: int, pointer: tuple[float, float], target_rect: ordering.Rect) -> list[str]:
        to_index = ordering.drop_index(self._items, ticket_id, target_id, pointer, target_rect, DRAG_AXIS)
        return await self._move(ticket_id, to_index)

    def _color(self, color: str) -> str:
        try:
            return normalize_color(color)
        except ValueError as exc:
            raise BoardValidationError(str(exc)) from exc

    async def set_color(self, ticket_id: int, color: str) -> bool:
        return await self.update(ticket_id, color=color)

    async def set_step(self, ticket_id: int, step_id: int | None) -> bool:
        return await self.update(ticket_id, current_step_id=step_id)

    async def set_number(self, ticket_id: int, number: int) -> bool:
        """Renumber a ticket; the number must be unused by any other ticket."""
        return await self.update(ticket_id, ticket_number=number)

    async def advance(self, ticket_id: int, direction: Direction | str) -> bool:
        """Move a ticket one step left or right, clamped to the sequence ends.

        An unassigned ticket enters at the first step going right and at the
        last step going left.
        """
        direction = Direction(direction)
        ticket = self.require(ticket_id)
        steps = self.steps.items
        if not steps:
            return False
        current = self.steps.index_of(ticket.current_step_id) if ticket.current_step_id is not None else -1
        if current < 0:
            target = 0 if direction is Direction.RIGHT else len(steps) - 1
        elif direction is Direction.RIGHT:
            target = min(current + 1, len(steps) - 1)
        else:
            target = max(current - 1, 0)
        step_id = steps[target].id
        if step_id == ticket.current_step_id:
            return True
        return await self._apply(ticket, {"current_step_id": step_id})

    def release_step(self, step_id: int) -> list[tuple[str, Awaitable[Any]]]:
        """Unassign every ticket on ``step_id``; return the calls that persist it."""
        affected = [ticket for ticket in self._items if ticket.current_step_id == step_id]
        for ticket in affected:
            ticket.current_step_id = None
            self.emit("updated", ticket)
        return [
            (f"clear step of ticket {ticket.id}", self.gateway.update(ticket.id, {"current_step_id": None}))
            for ticket in affected
        ]

    async def recolor(self, old_color: str | None, new_color: str) -> list[str]:
        """Recolor every ticket using ``old_color`` (every custom color when ``None``)."""
        new_color = self._color(new_color)
        affected = [
            ticket
            for ticket in self._items
            if (is_custom_color(ticket.color) if old_color is None else ticket.color == old_color)
        ]
        for ticket in affected:
            ticket.color = new_color
            self.emit("updated", ticket)
        calls = [
            (f"update ticket {ticket.id}", self.gateway.update(ticket.id, {"color": new_color}))
            for ticket in affected
        ]
        return await self._join(calls)
