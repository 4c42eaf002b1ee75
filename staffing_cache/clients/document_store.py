"""Document store HTTP client.

Async client for the remote document store's REST API. Uses a single
lazily created httpx.AsyncClient for connection pooling.

Unlike a best-effort client, this one does not fall back to empty
results: any transport, status, or payload error is raised as
RemoteUnavailable so the cache accessor can decide whether to surface it
(miss path) or log it (background refresh).
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Any

import httpx
from pydantic import TypeAdapter

from staffing_cache.core.config import Settings
from staffing_cache.core.exceptions import RemoteUnavailable
from staffing_cache.core.logging import get_logger
from staffing_cache.schemas.scheduling import (
    ChatMessage,
    RequirementTemplate,
    ScheduleSlot,
    StaffMember,
)


logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0

ENDPOINT_STAFF = "/v1/owners/{owner_id}/staff"
ENDPOINT_TEMPLATE = "/v1/owners/{owner_id}/requirement-templates/{period}"
ENDPOINT_SLOTS = "/v1/owners/{owner_id}/schedule-slots"
ENDPOINT_MESSAGES = "/v1/rooms/{room_id}/messages"

_staff_adapter = TypeAdapter(list[StaffMember])
_slots_adapter = TypeAdapter(list[ScheduleSlot])
_messages_adapter = TypeAdapter(list[ChatMessage])
_template_adapter = TypeAdapter(RequirementTemplate)


class DocumentStoreClient:
    """HTTP client for the scheduling document store.

    Implements ScheduleDataSourceProtocol.

    Attributes:
        base_url: Base URL of the document store API
        timeout: Request timeout in seconds

    Example:
        >>> client = DocumentStoreClient(base_url="http://localhost:8090")
        >>> staff = await client.fetch_staff_roster("mgr_1")
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the document store client.

        Args:
            base_url: Base URL of the document store API
            timeout: Request timeout in seconds (default: 10.0)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> DocumentStoreClient:
        """Build a client from application settings."""
        return cls(
            base_url=settings.document_store_url,
            timeout=settings.http_timeout_seconds,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client (lazy initialization).

        Returns:
            Shared httpx.AsyncClient instance (connection pooling)
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
            await asyncio.sleep(0)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(
        self,
        resource: str,
        path: str,
        params: dict[str, str] | None = None,
        allow_missing: bool = False,
    ) -> Any:
        """GET a JSON document.

        Returns:
            Decoded JSON, or None on 404 when ``allow_missing`` is set

        Raises:
            RemoteUnavailable: On transport errors, non-2xx status, or bad JSON
        """
        client = await self._get_client()
        try:
            response = await client.get(path, params=params)
            if allow_missing and response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Document store returned error", resource=resource, status=e.response.status_code)
            raise RemoteUnavailable(
                f"Fetching {resource} failed with status {e.response.status_code}",
                resource=resource,
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Document store unreachable", resource=resource, error=str(e))
            raise RemoteUnavailable(f"Fetching {resource} failed: {e}", resource=resource) from e

    def _validate(self, resource: str, adapter: TypeAdapter[Any], data: Any) -> Any:
        try:
            return adapter.validate_python(data)
        except ValueError as e:
            raise RemoteUnavailable(f"Malformed {resource} payload: {e}", resource=resource) from e

    async def fetch_staff_roster(self, owner_id: str) -> list[StaffMember]:
        """Return the staff roster for an owner."""
        data = await self._get_json("staff roster", ENDPOINT_STAFF.format(owner_id=owner_id))
        staff: list[StaffMember] = self._validate("staff roster", _staff_adapter, data)
        return staff

    async def fetch_requirement_template(
        self, owner_id: str, period: str
    ) -> RequirementTemplate | None:
        """Return the template for a period, or None if none exists (404)."""
        data = await self._get_json(
            "requirement template",
            ENDPOINT_TEMPLATE.format(owner_id=owner_id, period=period),
            allow_missing=True,
        )
        if data is None:
            return None
        template: RequirementTemplate = self._validate(
            "requirement template", _template_adapter, data
        )
        return template

    async def fetch_schedule_slots(
        self, owner_id: str, start: date, end: date
    ) -> list[ScheduleSlot]:
        """Return slots dated within [start, end]."""
        data = await self._get_json(
            "schedule slots",
            ENDPOINT_SLOTS.format(owner_id=owner_id),
            params={"start": start.isoformat(), "end": end.isoformat()},
        )
        slots: list[ScheduleSlot] = self._validate("schedule slots", _slots_adapter, data)
        return slots

    async def fetch_conversation(
        self, room_id: str, since: datetime
    ) -> list[ChatMessage]:
        """Return messages in a room sent at or after ``since``."""
        data = await self._get_json(
            "conversation",
            ENDPOINT_MESSAGES.format(room_id=room_id),
            params={"since": since.isoformat()},
        )
        messages: list[ChatMessage] = self._validate("conversation", _messages_adapter, data)
        return messages
