"""
Catalog - Transport Backend

The catalog server is an external collaborator. CatalogBackend names the
operations the client consumes; MediaApiClient implements them over HTTP
with aiohttp and JSON payloads.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type, TypeVar

import aiohttp
from loguru import logger
from pydantic import BaseModel, ValidationError

from mediadb.core.base_system import BaseSystem
from mediadb.core.config import ApiSettings
from mediadb.core.errors import TransportError
from mediadb.catalog.models import Entity, Tag

M = TypeVar("M", bound=BaseModel)


class CatalogBackend(ABC):
    """Operations offered by the catalog server."""

    @abstractmethod
    async def fetch_autocomplete_tags(self) -> List[Tag]:
        """All tags, each with its root-to-self display path."""

    @abstractmethod
    async def fetch_tags(self) -> List[Tag]:
        """Flat tag list for the browsable hierarchy."""

    @abstractmethod
    async def add_tag(self, parent_id: int, name: str) -> Tag:
        """Create a tag; the server assigns id and canonical name."""

    @abstractmethod
    async def fetch_entities(self, query: Optional[str] = None) -> List[Entity]:
        """Entity summaries, optionally filtered by a search query."""

    @abstractmethod
    async def fetch_entity(self, entity_id: int) -> Entity:
        """Full entity record."""

    @abstractmethod
    async def save_entity(self, entity: Entity) -> Entity:
        """Persist an entity and return the stored record."""


class MediaApiClient(BaseSystem, CatalogBackend):
    """
    HTTP client for the catalog server.

    Owns a single aiohttp session for its lifetime. Every failure (connection,
    timeout, HTTP status, malformed payload) is raised as TransportError.

    Usage:
        client = locator.get_system(MediaApiClient)
        tags = await client.fetch_autocomplete_tags()
    """

    depends_on = []

    def __init__(self, locator, config):
        super().__init__(locator, config)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def settings(self) -> ApiSettings:
        return self.config.data.api

    async def initialize(self) -> None:
        """Open the HTTP session."""
        logger.info(f"MediaApiClient initializing ({self.settings.base_url})")
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
        self._session = aiohttp.ClientSession(timeout=timeout)
        await super().initialize()
        logger.info("MediaApiClient ready")

    async def shutdown(self) -> None:
        """Close the HTTP session."""
        logger.info("MediaApiClient shutting down")
        if self._session is not None:
            await self._session.close()
            self._session = None
        await super().shutdown()

    # --- Operations ---

    async def fetch_autocomplete_tags(self) -> List[Tag]:
        payload = await self._request("fetch_autocomplete_tags", "GET", "/api/tags/autocomplete")
        return self._parse_list("fetch_autocomplete_tags", Tag, payload, "tag")

    async def fetch_tags(self) -> List[Tag]:
        payload = await self._request("fetch_tags", "GET", "/api/tags")
        return self._parse_list("fetch_tags", Tag, payload, "tag")

    async def add_tag(self, parent_id: int, name: str) -> Tag:
        payload = await self._request(
            "add_tag", "POST", "/api/tags", json_body={"pid": parent_id, "name": name}
        )
        tag = self._parse("add_tag", Tag, payload)
        logger.info(f"Server created tag: {tag.canonical_name} (parent {parent_id})")
        return tag

    async def fetch_entities(self, query: Optional[str] = None) -> List[Entity]:
        params = {"q": query} if query else None
        payload = await self._request("fetch_entities", "GET", "/api/media", params=params)
        return self._parse_list("fetch_entities", Entity, payload, "entity")

    async def fetch_entity(self, entity_id: int) -> Entity:
        payload = await self._request("fetch_entity", "GET", f"/api/media/{entity_id}")
        return self._parse("fetch_entity", Entity, payload)

    async def save_entity(self, entity: Entity) -> Entity:
        payload = await self._request(
            "save_entity", "PUT", f"/api/media/{entity.id}",
            json_body=entity.model_dump(mode="json"),
        )
        return self._parse("save_entity", Entity, payload)

    # --- Helpers ---

    def _url(self, route: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}{route}"

    async def _request(
        self,
        operation: str,
        method: str,
        route: str,
        params: Optional[dict] = None,
        json_body: Any = None,
    ) -> Any:
        if self._session is None or self._session.closed:
            raise TransportError(operation, "client is not initialized")

        url = self._url(route)
        logger.debug(f"{method} {url} params={params}")
        try:
            async with self._session.request(method, url, params=params, json=json_body) as response:
                if response.status >= 400:
                    raise TransportError(operation, response.reason or "request rejected", status=response.status)
                return await response.json()
        except asyncio.TimeoutError as e:
            raise TransportError(operation, "request timed out") from e
        except aiohttp.ClientError as e:
            raise TransportError(operation, str(e)) from e
        except ValueError as e:
            # Body labelled JSON that does not decode
            raise TransportError(operation, "malformed JSON payload") from e

    @staticmethod
    def _parse(operation: str, model: Type[M], payload: Any) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise TransportError(operation, f"malformed payload: {e.error_count()} error(s)") from e

    @classmethod
    def _parse_list(cls, operation: str, model: Type[M], payload: Any, key: str) -> List[M]:
        # Collections arrive either bare or wrapped as {"tag": [...]} / {"entity": [...]}
        if isinstance(payload, dict):
            payload = payload.get(key, [])
        if not isinstance(payload, list):
            raise TransportError(operation, f"expected a list, got {type(payload).__name__}")
        return [cls._parse(operation, model, item) for item in payload]
