"""Scheduling input models.

These records are produced by the scheduling and template-management
subsystems and are consumed read-only by this package:
- TimeSlot / Weekday: enumerations used as map keys
- ScheduleSlot: one staffable position on a date and time segment
- RequirementTemplate: target staffing counts per weekday with date overrides
- StaffMember: roster entry
- ChatMessage: conversation history entry
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class TimeSlot(str, Enum):
    """Time-of-day segments, in chronological order."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


TIME_SLOT_ORDER: dict[TimeSlot, int] = {slot: i for i, slot in enumerate(TimeSlot)}


class Weekday(str, Enum):
    """Day names used as keys of weekday requirements."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Return the weekday of a date."""
        return list(cls)[day.weekday()]


class ScheduleSlot(BaseModel):
    """A single staffable position.

    Attributes:
        date: Calendar date of the slot
        time_slot: Time-of-day segment
        assigned_staff_ref: Staff UID when filled; None or blank when open
        slot_id: Identifier in the remote store, if known
    """

    date: date
    time_slot: TimeSlot
    assigned_staff_ref: str | None = Field(default=None, description="Assigned staff UID")
    slot_id: str | None = None

    @property
    def is_filled(self) -> bool:
        """Whether a staff member is assigned."""
        return bool(self.assigned_staff_ref and self.assigned_staff_ref.strip())


class RequirementTemplate(BaseModel):
    """Target staffing counts for one owner and period.

    Date overrides take precedence over weekday defaults.
    """

    owner_id: str
    period: str = Field(..., description="Period the template applies to, e.g. 2024-03")
    weekday_requirements: dict[Weekday, dict[TimeSlot, int]] = Field(default_factory=dict)
    date_overrides: dict[date, dict[TimeSlot, int]] = Field(default_factory=dict)

    def required_for(self, day: date, time_slot: TimeSlot) -> int | None:
        """Required staff for a date and segment, or None if unspecified."""
        override = self.date_overrides.get(day)
        if override is not None and time_slot in override:
            return override[time_slot]
        return self.weekday_requirements.get(Weekday.of(day), {}).get(time_slot)


class StaffMember(BaseModel):
    """Roster entry for a staff member."""

    uid: str
    name: str = ""
    hourly_rate: int | None = Field(default=None, ge=0, description="Hourly wage; default applies when unset")


class ChatMessage(BaseModel):
    """Entry in a conversation history."""

    message_id: str
    room_id: str
    sender_id: str
    body: str = ""
    sent_at: datetime
