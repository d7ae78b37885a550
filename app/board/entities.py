# app/board/entities.py
from dataclasses import asdict, dataclass, fields
from typing import Any

from app.ticket.colors import DEFAULT_COLOR

TICKET_FIELDS = ("ticket_number", "color", "notes", "current_step_id", "order_index")


def _known(cls, payload: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in payload.items() if k in names}


@dataclass
class Ticket:
    """Local mirror of a ticket record."""

    id: int
    ticket_number: int
    color: str = DEFAULT_COLOR
    notes: str = ""
    current_step_id: int | None = None
    order_index: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Ticket":
        data = _known(cls, payload)
        data["notes"] = data.get("notes") or ""
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Step:
    """Local mirror of a workflow step record."""

    id: int
    name: str = ""
    order_index: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Step":
        data = _known(cls, payload)
        data["name"] = data.get("name") or ""
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
