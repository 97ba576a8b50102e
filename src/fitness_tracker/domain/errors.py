"""Domain errors surfaced to the request layer."""

from uuid import UUID


class FitnessTrackerError(Exception):
    """Base class for per-request domain failures."""


class ValidationError(FitnessTrackerError):
    """A field violates a domain constraint."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class IndexOutOfRange(FitnessTrackerError):  # noqa: N818
    """A mutation targets a list position that does not exist."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"Index {index} out of range for {size} item(s)")


class ConflictRetryable(FitnessTrackerError):  # noqa: N818
    """A concurrent write changed the record since it was read."""

    def __init__(self, entity: str, entity_id: UUID | str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"Concurrent update of {entity} {entity_id}")
