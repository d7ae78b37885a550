# tests/test_http_gateway.py
import httpx
import pytest

from app.board.board import Board
from app.board.errors import GatewayError
from app.board.gateway import HttpGateway
from app.main import app

pytestmark = [pytest.mark.anyio, pytest.mark.usefixtures("reset_db")]


@pytest.fixture
async def gateway(anyio_backend):
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    async with HttpGateway(client) as gw:
        yield gw


async def test_walkthrough_against_the_api(gateway, notifier, settings):
    board = Board(gateway, notifier, settings)
    await board.load()

    intake = await board.steps.create("Intake")
    await board.steps.create("Review")
    done = await board.steps.create("Done")
    ticket = await board.tickets.create()
    assert ticket.current_step_id == intake.id

    await board.tickets.advance(ticket.id, "right")
    await board.tickets.advance(ticket.id, "right")
    await board.steps.delete(done.id)

    fresh = Board(gateway, notifier, settings)
    await fresh.load()
    assert [s.name for s in fresh.steps] == ["Intake", "Review"]
    assert [s.order_index for s in fresh.steps] == [0, 1]
    assert fresh.tickets.require(ticket.id).current_step_id is None
    assert notifier.errors == []


async def test_reordering_persists(gateway, notifier, settings):
    board = Board(gateway, notifier, settings)
    tickets = [await board.tickets.create(number=n) for n in (11, 12, 13, 14, 15)]
    await board.tickets.move(tickets[3].id, 0)

    records = await gateway.tickets.list_all()
    assert [r["ticket_number"] for r in records] == [14, 11, 12, 13, 15]
    assert [r["order_index"] for r in records] == [0, 1, 2, 3, 4]


async def test_notes_reach_the_api_after_debounce(gateway, notifier, settings):
    board = Board(gateway, notifier, settings)
    ticket = await board.tickets.create(number=20)

    board.tickets.update_notes_debounced(ticket.id, "draft")
    board.tickets.update_notes_debounced(ticket.id, "final")
    await board.aclose()

    (record,) = await gateway.tickets.list_all()
    assert record["notes"] == "final"


async def test_duplicate_number_surfaces_conflict(gateway):
    await gateway.tickets.create({"ticket_number": 50})
    with pytest.raises(GatewayError) as exc_info:
        await gateway.tickets.create({"ticket_number": 50})
    assert exc_info.value.status_code == 409
    assert "already in use" in str(exc_info.value)


async def test_update_of_missing_record_raises(gateway):
    with pytest.raises(GatewayError) as exc_info:
        await gateway.steps.update(999, {"name": "ghost"})
    assert exc_info.value.status_code == 404


async def test_delete_of_missing_record_returns_false(gateway):
    step = await gateway.steps.create({"name": "Once"})
    assert await gateway.steps.delete(step["id"]) is True
    assert await gateway.steps.delete(step["id"]) is False


async def test_unreachable_server_is_a_gateway_error(notifier, settings):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test")
    async with HttpGateway(client) as gw:
        board = Board(gw, notifier, settings)
        with pytest.raises(GatewayError):
            await board.load()
    assert notifier.errors == ["Failed to load the board. Make sure the server is running."]


async def test_gateway_from_settings(settings):
    async with HttpGateway.from_settings(settings) as gw:
        assert str(gw.client.base_url).rstrip("/") == settings.API_BASE_URL
        assert gw.client.timeout.read == settings.API_TIMEOUT
        assert gw.tickets._url(3) == "/tickets/3"
        assert gw.steps._url() == "/steps/"
