"""Friend graph stored as directed (user_id, friend_id) edges."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.errors import ValidationError
from fitness_tracker.domain.user_stats import Friendship


class FriendshipRepository(Protocol):
    """Persistence interface for friend edges."""

    def get_friendship(self, user_id: UUID, friend_id: UUID) -> Friendship | None:
        """Return the edge from user_id to friend_id, if present."""

    def create_friendship(self, friendship: Friendship) -> None:
        """Persist an edge; creating an existing edge is a no-op."""

    def delete_friendship(self, user_id: UUID, friend_id: UUID) -> None:
        """Delete an edge; deleting a missing edge is a no-op."""

    def list_friend_ids(self, user_id: UUID) -> list[UUID]:
        """Return friend ids for a user."""


@dataclass
class FriendService:
    """Maintains one direction of the friend relation.

    The reverse edge belongs to the caller; this service never writes it.
    """

    repository: FriendshipRepository

    def add_friend(self, user_id: UUID, friend_id: UUID) -> bool:
        """Add an edge, returning False when it already existed."""
        if user_id == friend_id:
            raise ValidationError("friend_id", "cannot befriend yourself")
        if self.repository.get_friendship(user_id, friend_id) is not None:
            return False
        self.repository.create_friendship(
            Friendship(
                user_id=user_id,
                friend_id=friend_id,
                created_at=datetime.now(tz=UTC),
            )
        )
        return True

    def remove_friend(self, user_id: UUID, friend_id: UUID) -> bool:
        """Remove an edge, returning False when there was none."""
        if self.repository.get_friendship(user_id, friend_id) is None:
            return False
        self.repository.delete_friendship(user_id, friend_id)
        return True

    def list_friends(self, user_id: UUID) -> list[UUID]:
        """Return the user's friend ids."""
        return self.repository.list_friend_ids(user_id)
