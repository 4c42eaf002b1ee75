"""Cache statistics models."""

from pydantic import BaseModel, Field


class CacheStats(BaseModel):
    """Aggregate view of the live entries in a cache store.

    Attributes:
        total_entries: Number of entries not expired at call time
        total_size_bytes: Summed serialized size of those entries
        by_category: Entry count per key category
    """

    total_entries: int = Field(default=0, ge=0)
    total_size_bytes: int = Field(default=0, ge=0)
    by_category: dict[str, int] = Field(default_factory=dict)


class UsageReport(BaseModel):
    """Accessor-level hit/miss counters combined with store statistics."""

    hits: int = Field(default=0, ge=0)
    misses: int = Field(default=0, ge=0)
    hit_rate: float = Field(default=0.0, ge=0.0, le=1.0, description="hits / (hits + misses)")
    total_entries: int = Field(default=0, ge=0)
    total_size_bytes: int = Field(default=0, ge=0)
