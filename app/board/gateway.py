# app/board/gateway.py
"""Persistence gateway used by the board registries.

A gateway exposes, per entity type, ``list_all``/``create``/``update``/
``delete`` coroutines working on plain dicts. ``HttpEntityGateway`` talks to
the ticket board REST API (see ``app.main``).
"""
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from app.board.errors import GatewayError
from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EntityGateway(ABC):
    @abstractmethod
    async def list_all(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    async def update(self, entity_id: int, fields: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete a record; ``False`` when it did not exist."""


class PersistenceGateway:
    def __init__(self, tickets: EntityGateway, steps: EntityGateway):
        self.tickets = tickets
        self.steps = steps


class HttpEntityGateway(EntityGateway):
    def __init__(self, client: httpx.AsyncClient, resource: str):
        self.client = client
        self.resource = resource.strip("/")

    def _url(self, entity_id: int | None = None) -> str:
        if entity_id is None:
            return f"/{self.resource}/"
        return f"/{self.resource}/{entity_id}"

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise GatewayError(f"{method} {url} failed: {exc}") from exc
        if response.status_code == 404 and method == "DELETE":
            return response
        if response.is_error:
            detail = response.text
            try:
                detail = response.json().get("detail", detail)
            except ValueError:
                pass
            raise GatewayError(
                f"{method} {url} returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response

    async def list_all(self) -> list[dict[str, Any]]:
        response = await self._send("GET", self._url())
        return response.json()

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        response = await self._send("POST", self._url(), json=fields)
        return response.json()

    async def update(self, entity_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        response = await self._send("PUT", self._url(entity_id), json=fields)
        return response.json()

    async def delete(self, entity_id: int) -> bool:
        response = await self._send("DELETE", self._url(entity_id))
        if response.status_code == 404:
            logger.warning("%s %s was already gone", self.resource, entity_id)
            return False
        return True


class HttpGateway(PersistenceGateway):
    """Gateway over one shared ``httpx.AsyncClient``; use as an async context manager."""

    def __init__(self, client: httpx.AsyncClient):
        super().__init__(HttpEntityGateway(client, "tickets"), HttpEntityGateway(client, "steps"))
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **client_kwargs) -> "HttpGateway":
        settings = settings or get_settings()
        client_kwargs.setdefault("base_url", settings.API_BASE_URL)
        client_kwargs.setdefault("timeout", settings.API_TIMEOUT)
        return cls(httpx.AsyncClient(**client_kwargs))

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "HttpGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
