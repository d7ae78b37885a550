# tests/conftest.py
import asyncio
import os
import tempfile
from pathlib import Path

# the API modules build their engine at import time
os.environ["DATABASE_URL"] = f"sqlite:///{Path(tempfile.mkdtemp()) / 'test_board.db'}"

import pytest

from app.board.board import Board
from app.board.errors import GatewayError
from app.board.gateway import EntityGateway, PersistenceGateway
from app.core.config import Settings


class MemoryEntityGateway(EntityGateway):
    """Dict-backed gateway that records every call.

    ``fail_on`` holds operation names (``"create"``, ``"update"``,
    ``"delete"``, ``"list"``) or ``(operation, id)`` pairs to refuse.
    """

    def __init__(self, defaults=None):
        self.records = {}
        self.calls = []
        self.fail_on = set()
        self.defaults = defaults or {}
        self._next_id = 1

    def _refuse(self, operation, entity_id=None):
        if operation in self.fail_on or (operation, entity_id) in self.fail_on:
            raise GatewayError(f"{operation} {entity_id} refused", status_code=500)

    def seed(self, **fields):
        record = {**self.defaults, **fields, "id": self._next_id}
        self._next_id += 1
        self.records[record["id"]] = record
        return dict(record)

    def updates(self, entity_id=None):
        return [
            fields
            for operation, target, fields in self.calls
            if operation == "update" and (entity_id is None or target == entity_id)
        ]

    def order(self):
        return [record["id"] for record in sorted(self.records.values(), key=lambda r: r["order_index"])]

    async def list_all(self):
        await asyncio.sleep(0)
        self._refuse("list")
        return [dict(r) for r in sorted(self.records.values(), key=lambda r: (r["order_index"], r["id"]))]

    async def create(self, fields):
        self.calls.append(("create", None, dict(fields)))
        await asyncio.sleep(0)
        self._refuse("create")
        fields = dict(fields)
        if fields.get("order_index") is None:
            fields["order_index"] = max((r["order_index"] for r in self.records.values()), default=-1) + 1
        return self.seed(**fields)

    async def update(self, entity_id, fields):
        self.calls.append(("update", entity_id, dict(fields)))
        await asyncio.sleep(0)
        self._refuse("update", entity_id)
        if entity_id not in self.records:
            raise GatewayError(f"{entity_id} not found", status_code=404)
        self.records[entity_id].update(fields)
        return dict(self.records[entity_id])

    async def delete(self, entity_id):
        self.calls.append(("delete", entity_id, None))
        await asyncio.sleep(0)
        self._refuse("delete", entity_id)
        return self.records.pop(entity_id, None) is not None


class RecordingNotifier:
    def __init__(self, answer=True):
        self.answer = answer
        self.errors = []
        self.infos = []
        self.prompts = []

    def error(self, message):
        self.errors.append(message)

    def info(self, message):
        self.infos.append(message)

    async def confirm(self, title, message):
        self.prompts.append((title, message))
        return self.answer


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return PersistenceGateway(
        MemoryEntityGateway(defaults={"color": "white", "notes": "", "current_step_id": None}),
        MemoryEntityGateway(defaults={"name": ""}),
    )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def settings():
    return Settings(_env_file=None, NOTES_DEBOUNCE_SECONDS=0.05)


@pytest.fixture
def board(store, notifier, settings):
    return Board(store, notifier, settings)


@pytest.fixture
def reset_db():
    from app.core.database import Base, engine
    import app.main  # noqa: F401  registers every table

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
