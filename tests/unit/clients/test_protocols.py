"""Unit tests for the remote data source protocol.

Verifies the real HTTP client and the test fake both satisfy
ScheduleDataSourceProtocol.
"""

from staffing_cache.clients import DocumentStoreClient, ScheduleDataSourceProtocol
from tests.fakes.fake_clients import FakeScheduleDataSource


class TestScheduleDataSourceProtocol:
    """Tests for ScheduleDataSourceProtocol definition."""

    def test_protocol_declares_fetch_methods(self) -> None:
        """Protocol defines every fetch plus close()."""
        for name in (
            "fetch_staff_roster",
            "fetch_requirement_template",
            "fetch_schedule_slots",
            "fetch_conversation",
            "close",
        ):
            assert name in dir(ScheduleDataSourceProtocol)

    def test_document_store_client_implements_protocol(self) -> None:
        """DocumentStoreClient passes an isinstance check."""
        client = DocumentStoreClient(base_url="http://document-store.test")
        assert isinstance(client, ScheduleDataSourceProtocol)

    def test_fake_implements_protocol(self) -> None:
        """FakeScheduleDataSource passes an isinstance check."""
        assert isinstance(FakeScheduleDataSource(), ScheduleDataSourceProtocol)
