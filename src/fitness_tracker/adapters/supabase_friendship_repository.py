"""Supabase repository for friend edges."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.user_stats import Friendship
from fitness_tracker.services.friends import FriendshipRepository

TABLE = "friendships"


@dataclass
class SupabaseFriendshipRepository(FriendshipRepository):
    """Supabase implementation keyed by (user_id, friend_id)."""

    client: Client

    def get_friendship(self, user_id: UUID, friend_id: UUID) -> Friendship | None:
        """Return the edge if it exists."""
        response = (
            self.client.table(TABLE)
            .select("user_id, friend_id, created_at")
            .eq("user_id", str(user_id))
            .eq("friend_id", str(friend_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Friendship(
            user_id=UUID(row["user_id"]),
            friend_id=UUID(row["friend_id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def create_friendship(self, friendship: Friendship) -> None:
        """Upsert the edge so repeated adds stay idempotent."""
        self.client.table(TABLE).upsert(
            {
                "user_id": str(friendship.user_id),
                "friend_id": str(friendship.friend_id),
                "created_at": friendship.created_at.isoformat(),
            },
            on_conflict="user_id,friend_id",
            ignore_duplicates=True,
        ).execute()

    def delete_friendship(self, user_id: UUID, friend_id: UUID) -> None:
        """Delete the edge."""
        self.client.table(TABLE).delete().eq("user_id", str(user_id)).eq(
            "friend_id", str(friend_id)
        ).execute()

    def list_friend_ids(self, user_id: UUID) -> list[UUID]:
        """Return friend ids for a user, oldest edge first."""
        response = (
            self.client.table(TABLE)
            .select("friend_id")
            .eq("user_id", str(user_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [UUID(row["friend_id"]) for row in response.data or []]
