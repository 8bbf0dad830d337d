"""Storage protocol shared by the SQL and in-memory stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from yogaflow.models.pose import Pose
    from yogaflow.models.sequence import Sequence


@runtime_checkable
class SequenceStore(Protocol):
    """Pose catalog access plus sequence persistence.

    Lookups of missing records raise :class:`~yogaflow.errors.NotFoundError`;
    failed writes raise :class:`~yogaflow.errors.PersistenceError` and leave
    nothing half-written.
    """

    def list_poses(self) -> list[Pose]:
        """Return every catalog pose, ordered by id."""
        ...

    def get_pose(self, pose_id: str) -> Pose:
        ...

    def add_poses(self, poses: Iterable[Pose]) -> int:
        """Insert or replace catalog poses; returns how many were written."""
        ...

    def save_sequence(self, sequence: Sequence) -> Sequence:
        """Insert a new sequence with all its phases and placements."""
        ...

    def get_sequence(self, sequence_id: str) -> Sequence:
        ...

    def list_sequences(self, user_id: str | None = None) -> list[Sequence]:
        """Return sequences newest first, only *user_id*'s when given."""
        ...

    def update_sequence(self, sequence: Sequence) -> Sequence:
        """Replace a stored sequence, phases and placements included."""
        ...

    def delete_sequence(self, sequence_id: str) -> None:
        ...
