"""In-process store for tests, dry runs and the offline CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from yogaflow.errors import NotFoundError, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from yogaflow.models.pose import Pose
    from yogaflow.models.sequence import Sequence

logger = logging.getLogger(__name__)


class MemoryStore:
    """Keep poses and sequences in dictionaries.

    Stored and returned objects are deep copies, so callers can mutate what
    they get back without touching the store.
    """

    def __init__(self, poses: Iterable[Pose] = ()) -> None:
        self._poses: dict[str, Pose] = {}
        self._sequences: dict[str, Sequence] = {}
        self.add_poses(poses)

    def list_poses(self) -> list[Pose]:
        return [self._poses[k].model_copy(deep=True) for k in sorted(self._poses)]

    def get_pose(self, pose_id: str) -> Pose:
        try:
            return self._poses[pose_id].model_copy(deep=True)
        except KeyError:
            msg = f"pose {pose_id} not found"
            raise NotFoundError(msg) from None

    def add_poses(self, poses: Iterable[Pose]) -> int:
        count = 0
        for pose in poses:
            self._poses[pose.id] = pose.model_copy(deep=True)
            count += 1
        return count

    def save_sequence(self, sequence: Sequence) -> Sequence:
        if sequence.id in self._sequences:
            msg = f"failed to insert sequence {sequence.id}: id already exists"
            raise PersistenceError(msg)
        self._sequences[sequence.id] = sequence.model_copy(deep=True)
        logger.debug("Stored sequence %s in memory", sequence.id)
        return sequence

    def get_sequence(self, sequence_id: str) -> Sequence:
        try:
            return self._sequences[sequence_id].model_copy(deep=True)
        except KeyError:
            msg = f"sequence {sequence_id} not found"
            raise NotFoundError(msg) from None

    def list_sequences(self, user_id: str | None = None) -> list[Sequence]:
        found = [
            s for s in self._sequences.values() if user_id is None or s.user_id == user_id
        ]
        found.sort(key=lambda s: s.created_at, reverse=True)
        return [s.model_copy(deep=True) for s in found]

    def update_sequence(self, sequence: Sequence) -> Sequence:
        if sequence.id not in self._sequences:
            msg = f"sequence {sequence.id} not found"
            raise NotFoundError(msg)
        self._sequences[sequence.id] = sequence.model_copy(deep=True)
        return sequence

    def delete_sequence(self, sequence_id: str) -> None:
        if self._sequences.pop(sequence_id, None) is None:
            msg = f"sequence {sequence_id} not found"
            raise NotFoundError(msg)
