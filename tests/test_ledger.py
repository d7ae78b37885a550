# tests/test_ledger.py
from app.board.entities import Step
from app.board.ledger import ChangeLedger


def test_structural_events_are_described():
    ledger = ChangeLedger()
    ledger.open([Step(1, "Intake", 0)])

    ledger("created", Step(2, "", 1))
    ledger("moved", Step(2, "", 0))
    ledger("moved", Step(1, "Intake", 1))
    ledger("deleted", Step(1, "Intake", 1))

    assert ledger.descriptions == [
        "Added new step",
        'Moved step "Unnamed" to position 1',
        'Moved step "Intake" to position 2',
        'Deleted step: "Intake"',
    ]
    assert ledger.is_dirty()


def test_rename_only_marks_dirty():
    ledger = ChangeLedger()
    ledger.open([])
    ledger("renamed", Step(1, "New", 0))
    assert ledger.descriptions == []
    assert ledger.is_dirty()


def test_deleted_steps_can_be_popped_for_undo():
    ledger = ChangeLedger()
    ledger.open([])
    ledger("deleted", Step(3, "A", 0))
    ledger("deleted", Step(4, "B", 1))

    assert ledger.pop_undo() == {"id": 4, "name": "B", "order_index": 1}
    assert ledger.pop_undo()["name"] == "A"
    assert ledger.pop_undo() is None


def test_commit_starts_a_clean_session():
    ledger = ChangeLedger()
    ledger.open([Step(1, "A", 0)])
    ledger("deleted", Step(1, "A", 0))

    ledger.commit([Step(2, "B", 0)])

    assert not ledger.is_dirty()
    assert ledger.snapshot == [{"id": 2, "name": "B", "order_index": 0}]
    assert ledger.pop_undo() is None


def test_discard_forgets_everything():
    ledger = ChangeLedger()
    ledger.open([])
    ledger("created", Step(1, "", 0))
    ledger.discard()
    assert not ledger.is_dirty()
    assert ledger.descriptions == []
