"""Ratings ledger for catalog items."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.ratings import CatalogRating, Review
from fitness_tracker.services.validation import validate_rating


def recompute_average(rating: CatalogRating) -> CatalogRating:
    """Return the ledger with average and count matching its reviews."""
    count = len(rating.reviews)
    if count == 0:
        return replace(rating, average=0.0, count=0)
    total = sum(review.rating for review in rating.reviews)
    return replace(rating, average=total / count, count=count)


def add_or_replace_review(
    rating: CatalogRating,
    reviewer_id: UUID,
    score: int,
    comment: str | None = None,
    reviewed_at: datetime | None = None,
) -> CatalogRating:
    """Add a review, replacing the reviewer's earlier one in place."""
    validate_rating(score)
    review = Review(
        reviewer_id=reviewer_id,
        rating=score,
        comment=comment,
        created_at=reviewed_at or datetime.now(tz=UTC),
    )
    reviews = list(rating.reviews)
    for position, existing in enumerate(reviews):
        if existing.reviewer_id == reviewer_id:
            reviews[position] = review
            break
    else:
        reviews.append(review)
    return recompute_average(replace(rating, reviews=tuple(reviews)))


def increment_usage(rating: CatalogRating) -> CatalogRating:
    """Count one more use of the item."""
    return replace(rating, usage_count=rating.usage_count + 1)


class RatingRepository(Protocol):
    """Persistence interface for catalog ratings."""

    def get_rating(self, item_id: UUID) -> CatalogRating | None:
        """Return the rating ledger for an item, if present."""

    def create_rating(self, rating: CatalogRating) -> CatalogRating:
        """Persist a new ledger and return it."""

    def update_rating(self, rating: CatalogRating) -> CatalogRating:
        """Save a ledger if its version is current and return the stored record.

        Raises ConflictRetryable when the stored version has moved on.
        """


@dataclass
class RatingService:
    """Application service for reviews and usage of catalog items."""

    repository: RatingRepository

    def get_rating(self, item_id: UUID) -> CatalogRating:
        """Return the item's ledger, or an unsaved empty one if never rated."""
        existing = self.repository.get_rating(item_id)
        if existing is not None:
            return existing
        return CatalogRating(item_id=item_id)

    def add_review(
        self,
        item_id: UUID,
        reviewer_id: UUID,
        score: int,
        comment: str | None = None,
    ) -> CatalogRating:
        """Add or replace a reviewer's review of the item."""
        rating = self._load_or_create(item_id)
        updated = add_or_replace_review(rating, reviewer_id, score, comment)
        return self.repository.update_rating(updated)

    def record_usage(self, item_id: UUID) -> CatalogRating:
        """Increment the item's usage counter."""
        rating = self._load_or_create(item_id)
        return self.repository.update_rating(increment_usage(rating))

    def _load_or_create(self, item_id: UUID) -> CatalogRating:
        existing = self.repository.get_rating(item_id)
        if existing is not None:
            return existing
        return self.repository.create_rating(CatalogRating(item_id=item_id))
