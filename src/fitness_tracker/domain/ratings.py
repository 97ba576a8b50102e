"""Domain models for catalog item ratings."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Review:
    """A single reviewer's rating of a catalog item."""

    reviewer_id: UUID
    rating: int
    comment: str | None
    created_at: datetime


@dataclass(frozen=True)
class CatalogRating:
    """De-duplicated reviews and usage for a catalog item such as an exercise."""

    item_id: UUID
    reviews: tuple[Review, ...] = ()
    average: float = 0.0
    count: int = 0
    usage_count: int = 0
    version: int = 0
