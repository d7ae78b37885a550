# app/board/ordering.py
"""Dense ``order_index`` bookkeeping shared by tickets and steps.

Every function works on a list of items exposing ``id`` and a writable
``order_index`` and keeps the indices equal to the list positions. Functions
that touch other items return the ones whose index changed so the caller can
persist them.
"""
from enum import Enum
from typing import NamedTuple, Sequence, TypeVar

T = TypeVar("T")


class Axis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Rect(NamedTuple):
    left: float
    top: float
    width: float
    height: float


def position_of(sequence: Sequence[T], item_id) -> int:
    for position, item in enumerate(sequence):
        if item.id == item_id:
            return position
    raise KeyError(item_id)


def clamp(index: int, length: int) -> int:
    return max(0, min(index, length - 1))


def reindex(sequence: list[T]) -> list[T]:
    changed = []
    for position, item in enumerate(sequence):
        if item.order_index != position:
            item.order_index = position
            changed.append(item)
    return changed


def append(sequence: list[T], item: T) -> None:
    item.order_index = len(sequence)
    sequence.append(item)


def insert(sequence: list[T], item: T, index: int) -> list[T]:
    index = max(0, min(index, len(sequence)))
    sequence.insert(index, item)
    return [other for other in reindex(sequence) if other is not item]


def remove_dense(sequence: list[T], item_id) -> tuple[T, list[T]]:
    removed = sequence.pop(position_of(sequence, item_id))
    return removed, reindex(sequence)


def move(sequence: list[T], item_id, to_index: int) -> list[T]:
    from_index = position_of(sequence, item_id)
    to_index = clamp(to_index, len(sequence))
    if from_index == to_index:
        return []
    item = sequence.pop(from_index)
    sequence.insert(to_index, item)
    return reindex(sequence)


def drop_index(
    sequence: Sequence[T],
    dragged_id,
    target_id,
    pointer: tuple[float, float],
    target_rect: Rect,
    axis: Axis,
) -> int:
    """Final index of ``dragged_id`` when dropped on ``target_id``.

    The item lands before the target when the pointer is short of the
    target's midpoint along ``axis`` and after it otherwise.
    """
    from_index = position_of(sequence, dragged_id)
    target_index = position_of(sequence, target_id)
    if axis is Axis.VERTICAL:
        coordinate, midpoint = pointer[1], target_rect.top + target_rect.height / 2
    else:
        coordinate, midpoint = pointer[0], target_rect.left + target_rect.width / 2
    index = target_index if coordinate < midpoint else target_index + 1
    if from_index < index:
        index -= 1
    return index
