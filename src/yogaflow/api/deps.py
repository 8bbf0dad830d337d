"""FastAPI dependencies: app state accessors and the acting user."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from yogaflow.backend.base import TextBackend
from yogaflow.config import AppConfig
from yogaflow.errors import AuthorizationError
from yogaflow.models import Sequence
from yogaflow.pipeline.coalesce import RequestCoalescer
from yogaflow.store.base import SequenceStore


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_store(request: Request) -> SequenceStore:
    return request.app.state.store


def get_backend(request: Request) -> TextBackend | None:
    return request.app.state.backend


def get_coalescer(request: Request) -> RequestCoalescer:
    return request.app.state.coalescer


def current_user(request: Request) -> str | None:
    """Return the user id set by the upstream identity provider, if any."""
    header = request.app.state.config.server.user_header
    value = request.headers.get(header, "").strip()
    return value or None


def require_user(user: Annotated[str | None, Depends(current_user)]) -> str:
    if user is None:
        msg = "authentication required"
        raise AuthorizationError(msg, authenticated=False)
    return user


ConfigDep = Annotated[AppConfig, Depends(get_config)]
StoreDep = Annotated[SequenceStore, Depends(get_store)]
BackendDep = Annotated[TextBackend | None, Depends(get_backend)]
CoalescerDep = Annotated[RequestCoalescer, Depends(get_coalescer)]
UserDep = Annotated[str | None, Depends(current_user)]
RequiredUserDep = Annotated[str, Depends(require_user)]


def check_owner(sequence: Sequence, user_id: str | None) -> None:
    """Allow access to ownerless sequences and to the owner's own sequences.

    Raises
    ------
    AuthorizationError
        Unauthenticated (401) when no user is known, forbidden (403) when
        the sequence belongs to someone else.
    """
    if sequence.user_id is None:
        return
    if user_id is None:
        msg = "authentication required"
        raise AuthorizationError(msg, authenticated=False)
    if sequence.user_id != user_id:
        msg = f"sequence {sequence.id} belongs to another user"
        raise AuthorizationError(msg)


def owned_sequence(sequence_id: str, store: StoreDep, user: RequiredUserDep) -> Sequence:
    """Load *sequence_id* for modification by the signed-in user."""
    sequence = store.get_sequence(sequence_id)
    if sequence.user_id != user:
        msg = f"sequence {sequence_id} belongs to another user"
        raise AuthorizationError(msg)
    return sequence


OwnedSequenceDep = Annotated[Sequence, Depends(owned_sequence)]
