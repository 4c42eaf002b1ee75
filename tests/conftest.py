"""Test configuration and shared fixtures."""

from datetime import date

import pytest

from staffing_cache.cache.store import TTLCacheStore
from staffing_cache.core.config import Settings
from staffing_cache.schemas.scheduling import (
    RequirementTemplate,
    StaffMember,
    TimeSlot,
    Weekday,
)
from tests.fakes.fake_clock import FakeClock


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults."""
    return Settings(
        environment="testing",
        log_level="DEBUG",
        document_store_url="http://document-store.test",
        cache_namespace="test_",
        cache_storage_path=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> TTLCacheStore:
    """In-memory store driven by the fake clock."""
    return TTLCacheStore(namespace="test_", clock=clock)


# ============================================================================
# Scheduling Fixtures
# ============================================================================

@pytest.fixture
def friday_template() -> RequirementTemplate:
    """Weekday default 2/3/2 with a 3/4/3 override on Friday 2024-03-15."""
    weekday_default = {TimeSlot.MORNING: 2, TimeSlot.AFTERNOON: 3, TimeSlot.EVENING: 2}
    return RequirementTemplate(
        owner_id="mgr_1",
        period="2024-03",
        weekday_requirements={day: dict(weekday_default) for day in Weekday},
        date_overrides={
            date(2024, 3, 15): {TimeSlot.MORNING: 3, TimeSlot.AFTERNOON: 4, TimeSlot.EVENING: 3},
        },
    )


@pytest.fixture
def roster() -> list[StaffMember]:
    return [
        StaffMember(uid="u1", name="Aiko", hourly_rate=1200),
        StaffMember(uid="u2", name="Ben"),
        StaffMember(uid="u3", name="Chika", hourly_rate=1100),
    ]
