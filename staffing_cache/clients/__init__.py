"""Clients for the remote scheduling document store."""

from staffing_cache.clients.document_store import DocumentStoreClient
from staffing_cache.clients.protocols import ScheduleDataSourceProtocol


__all__ = [
    "DocumentStoreClient",
    "ScheduleDataSourceProtocol",
]
