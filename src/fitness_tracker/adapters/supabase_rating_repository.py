"""Supabase repository for catalog ratings."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from fitness_tracker.domain.errors import ConflictRetryable
from fitness_tracker.domain.ratings import CatalogRating, Review
from fitness_tracker.services.ratings import RatingRepository

TABLE = "catalog_ratings"
UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseRatingRepository(RatingRepository):
    """Supabase implementation for rating ledgers with versioned updates."""

    client: Client

    def get_rating(self, item_id: UUID) -> CatalogRating | None:
        """Return the ledger for a catalog item."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("item_id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_rating(self, rating: CatalogRating) -> CatalogRating:
        """Insert a ledger row, signalling a conflict if another writer won."""
        try:
            response = self.client.table(TABLE).insert(_to_row(rating)).execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise ConflictRetryable("catalog_rating", rating.item_id) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create catalog rating")
        return _parse_row(response.data[0])

    def update_rating(self, rating: CatalogRating) -> CatalogRating:
        """Write the ledger only if the stored version still matches."""
        payload = _to_row(rating)
        payload["version"] = rating.version + 1
        response = (
            self.client.table(TABLE)
            .update(payload)
            .eq("item_id", str(rating.item_id))
            .eq("version", rating.version)
            .execute()
        )
        if not response.data:
            raise ConflictRetryable("catalog_rating", rating.item_id)
        return _parse_row(response.data[0])


def _to_row(rating: CatalogRating) -> dict[str, object]:
    return {
        "item_id": str(rating.item_id),
        "reviews": [
            {
                "reviewer_id": str(review.reviewer_id),
                "rating": review.rating,
                "comment": review.comment,
                "created_at": review.created_at.isoformat(),
            }
            for review in rating.reviews
        ],
        "average": rating.average,
        "count": rating.count,
        "usage_count": rating.usage_count,
        "version": rating.version,
    }


def _parse_row(row: dict[str, object]) -> CatalogRating:
    return CatalogRating(
        item_id=UUID(row["item_id"]),
        reviews=tuple(
            Review(
                reviewer_id=UUID(review["reviewer_id"]),
                rating=int(review["rating"]),
                comment=review.get("comment"),
                created_at=datetime.fromisoformat(review["created_at"]),
            )
            for review in row.get("reviews") or []
        ),
        average=float(row.get("average", 0.0)),
        count=int(row.get("count", 0)),
        usage_count=int(row.get("usage_count", 0)),
        version=int(row.get("version", 0)),
    )
