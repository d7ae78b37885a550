# tests/test_step_registry.py
import asyncio

import pytest

from app.board.errors import UnknownEntityError
from app.board.ordering import Rect

pytestmark = pytest.mark.anyio


async def make_steps(board, *names):
    return [await board.steps.create(name) for name in names]


def names(registry):
    return [step.name for step in registry]


async def test_intake_review_done_walkthrough(board, store):
    intake, review, done = await make_steps(board, "Intake", "Review", "Done")
    assert [s.order_index for s in board.steps] == [0, 1, 2]

    ticket = await board.tickets.create()
    assert ticket.current_step_id == intake.id

    await board.tickets.advance(ticket.id, "right")
    await board.tickets.advance(ticket.id, "right")
    assert ticket.current_step_id == done.id
    assert board.tickets.step_label(ticket) == "Done"

    failed = await board.steps.delete(done.id)

    assert failed == []
    assert ticket.current_step_id is None
    assert store.tickets.records[ticket.id]["current_step_id"] is None
    assert names(board.steps) == ["Intake", "Review"]
    assert [s.order_index for s in board.steps] == [0, 1]
    assert done.id not in store.steps.records


async def test_delete_clears_every_reference_and_keeps_order(board, store):
    a, b, c = await make_steps(board, "A", "B", "C")
    on_b = [await board.tickets.create(number=n, step_id=b.id) for n in (1, 2, 3)]
    on_c = await board.tickets.create(number=4, step_id=c.id)

    await board.steps.delete(b.id)

    assert all(t.current_step_id is None for t in on_b)
    assert all(store.tickets.records[t.id]["current_step_id"] is None for t in on_b)
    assert on_c.current_step_id == c.id
    assert [s.id for s in board.steps] == [a.id, c.id]
    assert store.steps.records[c.id]["order_index"] == 1
    # no ticket points at a step that is gone
    step_ids = {s.id for s in board.steps}
    assert all(t.current_step_id in step_ids | {None} for t in board.tickets)


async def test_partial_cascade_failure_is_reported_per_ticket(board, store, notifier):
    (step,) = await make_steps(board, "Doomed")
    stuck = await board.tickets.create(number=1)
    freed = await board.tickets.create(number=2)
    store.tickets.fail_on.add(("update", stuck.id))

    failed = await board.steps.delete(step.id)

    assert failed == [f"clear step of ticket {stuck.id}"]
    assert notifier.errors == [f"Failed to clear step of ticket {stuck.id}."]
    assert stuck.current_step_id is None
    assert store.tickets.records[stuck.id]["current_step_id"] == step.id
    assert store.tickets.records[freed.id]["current_step_id"] is None
    assert step.id not in store.steps.records


async def test_create_failure_reports_and_returns_none(board, store, notifier):
    store.steps.fail_on.add("create")
    assert await board.steps.create("Nope") is None
    assert len(board.steps) == 0
    assert notifier.errors == ["Failed to add step."]


async def test_blank_step_gets_positional_label(board):
    _, blank = await make_steps(board, "Named", "   ")
    assert blank.name == ""
    assert board.steps.label(blank) == "Step 2"


async def test_rename_emits_renamed(board, store):
    (step,) = await make_steps(board, "Old")
    events = []
    board.steps.listen(lambda event, payload: events.append((event, payload.name)))

    assert await board.steps.rename(step.id, "  New  ")
    assert events == [("renamed", "New")]
    assert store.steps.records[step.id]["name"] == "New"


async def test_rename_many_only_persists_changes(board, store):
    a, b = await make_steps(board, "A", "B")
    store.steps.calls.clear()

    failed = await board.steps.rename_many({a.id: "A", b.id: "Bee"})

    assert failed == []
    assert store.steps.updates() == [{"name": "Bee"}]


async def test_move_by_delta_stays_in_bounds(board, store):
    a, b, c = await make_steps(board, "A", "B", "C")
    store.steps.calls.clear()

    assert await board.steps.move_by_delta(a.id, -1) == []
    assert await board.steps.move_by_delta(c.id, 1) == []
    assert store.steps.updates() == []

    await board.steps.move_by_delta(a.id, 1)
    assert names(board.steps) == ["B", "A", "C"]
    assert [store.steps.records[s.id]["order_index"] for s in board.steps] == [0, 1, 2]


async def test_move_unknown_step_raises(board):
    with pytest.raises(UnknownEntityError):
        await board.steps.move_by_delta(77, 1)


async def test_drop_uses_vertical_midpoint(board):
    a, b, c = await make_steps(board, "A", "B", "C")
    target = Rect(left=0, top=100, width=300, height=40)

    # upper half of the last step: lands just before it
    await board.steps.drop(a.id, c.id, (500, 110), target)
    assert names(board.steps) == ["B", "A", "C"]

    await board.steps.drop(a.id, c.id, (0, 130), target)
    assert names(board.steps) == ["B", "C", "A"]


async def test_restore_recreates_at_former_position(board, store):
    a, b, c = await make_steps(board, "A", "B", "C")
    snapshot = b.to_dict()
    await board.steps.delete(b.id)

    restored = await board.steps.restore(snapshot)

    assert restored.id != b.id
    assert names(board.steps) == ["A", "B", "C"]
    assert store.steps.order() == [a.id, restored.id, c.id]


async def test_load_sorts_and_repairs_gaps(board, store):
    late = store.steps.seed(name="Late", order_index=9)
    early = store.steps.seed(name="Early", order_index=2)

    await board.steps.load()

    assert [s.id for s in board.steps] == [early["id"], late["id"]]
    assert [s.order_index for s in board.steps] == [0, 1]
    assert store.steps.records[late["id"]]["order_index"] == 1


async def test_rename_many_rejects_unknown_ids_before_renaming(board, store):
    (step,) = await make_steps(board, "A")
    store.steps.calls.clear()
    events = []
    board.steps.listen(lambda event, payload: events.append(event))

    with pytest.raises(UnknownEntityError):
        await board.steps.rename_many({step.id: "Renamed", 999: "x"})

    assert step.name == "A"
    assert store.steps.calls == []
    assert events == []


async def test_references_are_cleared_before_delete_is_announced(board):
    (step,) = await make_steps(board, "Doomed")
    ticket = await board.tickets.create(number=1)
    seen = []
    board.steps.listen(lambda event, payload: seen.append((event, ticket.current_step_id)))

    async def observe():
        seen.append(("task", ticket.current_step_id))

    task = asyncio.get_running_loop().create_task(observe())
    await board.steps.delete(step.id)
    await task

    assert seen == [("deleted", None), ("task", None)]
