# app/board/ledger.py
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.board.entities import Step


@dataclass
class LedgerEntry:
    kind: str
    description: str
    step: dict[str, Any] = field(default_factory=dict)


class ChangeLedger:
    """Step edits made during one settings session.

    Structural edits (add, delete, reorder) are logged with a readable
    description; renames only set the dirty flag. Pass the ledger itself as a
    listener to ``StepRegistry.listen``.
    """

    def __init__(self) -> None:
        self.entries: list[LedgerEntry] = []
        self.snapshot: list[dict[str, Any]] = []
        self._dirty = False
        self._undo: list[dict[str, Any]] = []

    def open(self, steps: Iterable[Step]) -> None:
        self.entries = []
        self._dirty = False
        self._undo = []
        self.snapshot = [step.to_dict() for step in steps]

    def __call__(self, event: str, step: Any) -> None:
        if event == "created":
            self.record("added", "Added new step", step)
        elif event == "deleted":
            self.record("deleted", f'Deleted step: "{step.name or "Unnamed"}"', step)
            self._undo.append(step.to_dict())
        elif event == "moved":
            label = step.name or "Unnamed"
            self.record("moved", f'Moved step "{label}" to position {step.order_index + 1}', step)
        elif event == "renamed":
            self.mark_dirty()

    def record(self, kind: str, description: str, step: Step | None = None) -> None:
        self.entries.append(LedgerEntry(kind, description, step.to_dict() if step else {}))
        self._dirty = True

    def mark_dirty(self) -> None:
        self._dirty = True

    def is_dirty(self) -> bool:
        return bool(self.entries) or self._dirty

    @property
    def descriptions(self) -> list[str]:
        return [entry.description for entry in self.entries]

    def commit(self, steps: Iterable[Step]) -> None:
        self.open(steps)

    def discard(self) -> None:
        """Forget the session's edits; the caller reloads from the store."""
        self.entries = []
        self._dirty = False
        self._undo = []

    def pop_undo(self) -> dict[str, Any] | None:
        return self._undo.pop() if self._undo else None
