"""Remote data source protocol.

Duck typing protocol for the document store the accessor reads from -
enables FakeScheduleDataSource substitution in tests.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, runtime_checkable

from staffing_cache.schemas.scheduling import (
    ChatMessage,
    RequirementTemplate,
    ScheduleSlot,
    StaffMember,
)


@runtime_checkable
class ScheduleDataSourceProtocol(Protocol):
    """Protocol for clients of the remote scheduling document store.

    Every method may fail; implementations should raise RemoteUnavailable
    for transport or service errors.

    Methods:
        fetch_staff_roster: Staff managed by an owner
        fetch_requirement_template: Template for an owner and period
        fetch_schedule_slots: Slots for an owner in a date range
        fetch_conversation: Messages in a room since a point in time
        close: Release client resources
    """

    async def fetch_staff_roster(self, owner_id: str) -> list[StaffMember]:
        """Return the staff roster for an owner."""
        ...

    async def fetch_requirement_template(
        self, owner_id: str, period: str
    ) -> RequirementTemplate | None:
        """Return the requirement template, or None if the owner has none."""
        ...

    async def fetch_schedule_slots(
        self, owner_id: str, start: date, end: date
    ) -> list[ScheduleSlot]:
        """Return slots dated within [start, end]."""
        ...

    async def fetch_conversation(
        self, room_id: str, since: datetime
    ) -> list[ChatMessage]:
        """Return messages sent in a room at or after ``since``."""
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...
