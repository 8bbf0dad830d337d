"""SQLAlchemy-backed pose catalog and sequence store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, delete, event, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from yogaflow.errors import NotFoundError, PersistenceError
from yogaflow.models.pose import Pose
from yogaflow.models.sequence import Sequence, SequencePhase, SequencePose
from yogaflow.store.tables import Base, PhaseRow, PoseRow, SequencePoseRow, SequenceRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _columns(table: type[Base], data: dict[str, Any]) -> dict[str, Any]:
    return {c.name: data[c.name] for c in table.__table__.columns if c.name in data}


def _row_dict(row: Base) -> dict[str, Any]:
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class SqlStore:
    """Store poses and sequences in any SQLAlchemy-supported database.

    Every sequence write runs in a single transaction. Rows are inserted in
    dependency order (sequence, phases, placements) and flushed one by one,
    so the first failing row is reported by name and the whole write is
    rolled back.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        kwargs: dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        self.url = url
        self.engine = create_engine(url, **kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self.engine)
        logger.debug("Ensured schema on %s", self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.engine.dispose()

    # -- poses ---------------------------------------------------------------

    def list_poses(self) -> list[Pose]:
        with self._reading() as session:
            rows = session.scalars(select(PoseRow).order_by(PoseRow.id)).all()
            return [Pose.model_validate(_row_dict(r)) for r in rows]

    def get_pose(self, pose_id: str) -> Pose:
        with self._reading() as session:
            row = session.get(PoseRow, pose_id)
            if row is None:
                msg = f"pose {pose_id} not found"
                raise NotFoundError(msg)
            return Pose.model_validate(_row_dict(row))

    def add_poses(self, poses: Iterable[Pose]) -> int:
        count = 0
        with self._writing() as session:
            for pose in poses:
                session.merge(PoseRow(**_columns(PoseRow, pose.model_dump(mode="json"))))
                count += 1
        logger.info("Wrote %d poses", count)
        return count

    # -- sequences -----------------------------------------------------------

    def save_sequence(self, sequence: Sequence) -> Sequence:
        with self._writing() as session:
            self._insert_sequence(session, sequence)
        logger.info(
            "Saved sequence %s (%d phases, %d poses)",
            sequence.id, len(sequence.phases), sequence.pose_count,
        )
        return sequence

    def get_sequence(self, sequence_id: str) -> Sequence:
        with self._reading() as session:
            row = session.get(SequenceRow, sequence_id)
            if row is None:
                msg = f"sequence {sequence_id} not found"
                raise NotFoundError(msg)
            return self._load(session, row)

    def list_sequences(self, user_id: str | None = None) -> list[Sequence]:
        stmt = select(SequenceRow).order_by(SequenceRow.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(SequenceRow.user_id == user_id)
        with self._reading() as session:
            return [self._load(session, row) for row in session.scalars(stmt).all()]

    def update_sequence(self, sequence: Sequence) -> Sequence:
        with self._writing() as session:
            if not self._exists(session, sequence.id):
                msg = f"sequence {sequence.id} not found"
                raise NotFoundError(msg)
            self._delete_rows(session, sequence.id)
            self._insert_sequence(session, sequence)
        logger.info("Updated sequence %s", sequence.id)
        return sequence

    def delete_sequence(self, sequence_id: str) -> None:
        with self._writing() as session:
            if not self._exists(session, sequence_id):
                msg = f"sequence {sequence_id} not found"
                raise NotFoundError(msg)
            self._delete_rows(session, sequence_id)
        logger.info("Deleted sequence %s", sequence_id)

    # -- internals -----------------------------------------------------------

    @contextmanager
    def _reading(self) -> Iterator[Session]:
        try:
            with self._sessions() as session:
                yield session
        except SQLAlchemyError as exc:
            msg = f"database read failed: {exc}"
            raise PersistenceError(msg) from exc

    @contextmanager
    def _writing(self) -> Iterator[Session]:
        """Yield a session inside one transaction, rolled back on any error."""
        try:
            with self._sessions.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            msg = f"database write failed: {exc}"
            raise PersistenceError(msg) from exc

    def _exists(self, session: Session, sequence_id: str) -> bool:
        # A scalar query keeps the row out of the identity map before bulk deletes.
        found = session.scalar(select(SequenceRow.id).where(SequenceRow.id == sequence_id))
        return found is not None

    def _insert_sequence(self, session: Session, sequence: Sequence) -> None:
        data = sequence.model_dump(exclude={"phases"})
        rows: list[tuple[str, str, Base]] = [
            ("sequence", sequence.id, SequenceRow(**_columns(SequenceRow, data))),
        ]
        for phase in sequence.phases:
            phase_data = {**phase.model_dump(exclude={"poses"}), "sequence_id": sequence.id}
            rows.append(("phase", phase.id, PhaseRow(**_columns(PhaseRow, phase_data))))
        for phase in sequence.phases:
            for pose in phase.poses:
                pose_data = {
                    **pose.model_dump(mode="json"),
                    "sequence_id": sequence.id,
                    "phase_id": phase.id,
                }
                row = SequencePoseRow(**_columns(SequencePoseRow, pose_data))
                rows.append(("sequence pose", pose.id, row))

        for kind, row_id, row in rows:
            session.add(row)
            try:
                session.flush()
            except SQLAlchemyError as exc:
                msg = f"failed to insert {kind} {row_id}: {exc}"
                logger.error(msg)
                raise PersistenceError(msg) from exc

    def _delete_rows(self, session: Session, sequence_id: str) -> None:
        session.execute(delete(SequencePoseRow).where(SequencePoseRow.sequence_id == sequence_id))
        session.execute(delete(PhaseRow).where(PhaseRow.sequence_id == sequence_id))
        session.execute(delete(SequenceRow).where(SequenceRow.id == sequence_id))
        session.flush()

    def _load(self, session: Session, row: SequenceRow) -> Sequence:
        phase_rows = session.scalars(
            select(PhaseRow).where(PhaseRow.sequence_id == row.id).order_by(PhaseRow.position)
        ).all()
        pose_rows = session.scalars(
            select(SequencePoseRow)
            .where(SequencePoseRow.sequence_id == row.id)
            .order_by(SequencePoseRow.position)
        ).all()

        by_phase: dict[str, list[SequencePose]] = {p.id: [] for p in phase_rows}
        for pose_row in pose_rows:
            by_phase.setdefault(pose_row.phase_id, []).append(
                SequencePose.model_validate(_row_dict(pose_row))
            )
        phases = [
            SequencePhase.model_validate({**_row_dict(p), "poses": by_phase[p.id]})
            for p in phase_rows
        ]
        data = _row_dict(row)
        data["created_at"] = _aware(row.created_at)
        data["updated_at"] = _aware(row.updated_at)
        return Sequence.model_validate({**data, "phases": phases})
