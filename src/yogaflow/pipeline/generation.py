"""Generation flows: one-shot sequences, two-phase skeletons, pose filling and cues.

Every flow awaits its steps one after another: prompt, model call, parse,
match, assemble, persist. When no text backend is usable the rule-based
builders in :mod:`yogaflow.pipeline.fallback` take over.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from yogaflow.backend.base import TextRequest
from yogaflow.errors import (
    AuthorizationError,
    BackendError,
    CatalogEmptyError,
    NotFoundError,
)
from yogaflow.guidelines import load_guidelines
from yogaflow.pipeline.assembly import assemble_sequence, preserve_phase_ids, skeleton_sequence
from yogaflow.pipeline.fallback import (
    build_canned_sequence,
    build_fallback_sequence,
    default_structure,
    fill_structure_without_ai,
)
from yogaflow.pipeline.parser import parse_sequence_response, parse_structure_response
from yogaflow.pipeline.prompts import (
    CUES_SYSTEM_MESSAGE,
    SEQUENCE_SYSTEM_MESSAGE,
    STRUCTURE_SYSTEM_MESSAGE,
    build_cues_prompt,
    build_sequence_prompt,
    build_structure_prompt,
)

if TYPE_CHECKING:
    from collections.abc import Sequence as SequenceOf

    from yogaflow.backend.base import TextBackend
    from yogaflow.config import AppConfig
    from yogaflow.models.params import GenerationParams
    from yogaflow.models.pose import Pose
    from yogaflow.models.sequence import Sequence
    from yogaflow.models.structure import SequenceStructure
    from yogaflow.pipeline.coalesce import RequestCoalescer
    from yogaflow.store.base import SequenceStore

logger = logging.getLogger(__name__)


async def _usable(backend: TextBackend | None) -> bool:
    if backend is None:
        return False
    if await backend.is_available():
        return True
    logger.warning(
        "Text backend %s is unavailable; using rule-based generation", type(backend).__name__,
    )
    return False


def _guidelines(config: AppConfig) -> str:
    return load_guidelines(config.generation.guidelines_path)


def _load_catalog(store: SequenceStore) -> list[Pose]:
    catalog = store.list_poses()
    if not catalog:
        msg = "no poses available to build a sequence"
        raise CatalogEmptyError(msg)
    return catalog


async def _generate_with_ai(
    params: GenerationParams,
    catalog: SequenceOf[Pose],
    backend: TextBackend,
    config: AppConfig,
    *,
    structure: SequenceStructure | None = None,
    user_id: str | None = None,
) -> Sequence:
    prompt = build_sequence_prompt(
        params,
        _guidelines(config),
        catalog,
        structure,
        limit=config.generation.prompt_pose_limit,
    )
    result = await backend.complete(
        TextRequest(
            prompt=prompt,
            kind="sequence",
            system=SEQUENCE_SYSTEM_MESSAGE,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
            json_output=True,
        )
    )
    logger.debug("Model %s returned %d chars", result.model, len(result.text))
    generated = parse_sequence_response(result.text)
    return assemble_sequence(
        generated,
        params,
        catalog,
        policy=config.generation.unmatched_pose_policy,
        user_id=user_id,
        structure=structure,
    )


async def generate_sequence(
    params: GenerationParams,
    store: SequenceStore,
    backend: TextBackend | None,
    config: AppConfig,
    *,
    user_id: str | None = None,
    use_ai: bool = True,
    persist: bool = True,
) -> Sequence:
    """Generate a complete sequence and (by default) persist it.

    Parameters
    ----------
    params:
        Requested duration, difficulty, style and focus.
    store:
        Pose catalog and sequence persistence.
    backend:
        Text backend; ``None`` forces the rule-based path.
    config:
        Application configuration.
    user_id:
        Owner of the new sequence, ``None`` for anonymous use.
    use_ai:
        ``False`` bypasses the language model.
    persist:
        ``False`` returns the sequence without saving it.

    Raises
    ------
    CatalogEmptyError
        If the catalog has no poses.
    ParseError
        If the model output cannot be parsed.
    BackendError
        If the model call fails.
    PersistenceError
        If saving fails; nothing is left half-written.
    """
    catalog = _load_catalog(store)

    if use_ai and await _usable(backend):
        logger.info(
            "Generating %d-minute %s %s sequence with AI",
            params.duration, params.difficulty, params.style,
        )
        sequence = await _generate_with_ai(params, catalog, backend, config, user_id=user_id)
    else:
        sequence = build_fallback_sequence(
            params, catalog, user_id=user_id, min_poses=config.generation.min_fallback_poses,
        )

    if persist:
        store.save_sequence(sequence)
    return sequence


async def generate_structure(
    params: GenerationParams,
    backend: TextBackend | None,
    config: AppConfig,
) -> SequenceStructure:
    """Generate a sequence skeleton; the first step of two-phase generation."""
    if not await _usable(backend):
        return default_structure(params)

    result = await backend.complete(
        TextRequest(
            prompt=build_structure_prompt(params, _guidelines(config)),
            kind="structure",
            system=STRUCTURE_SYSTEM_MESSAGE,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
            json_output=True,
        )
    )
    structure = parse_structure_response(result.text)
    logger.info(
        "Generated structure '%s' with %d segments (%d min)",
        structure.name, len(structure.segments), structure.total_minutes,
    )
    return structure


async def fill_sequence_with_poses(
    structure: SequenceStructure,
    params: GenerationParams,
    catalog: SequenceOf[Pose],
    backend: TextBackend | None,
    config: AppConfig,
    *,
    user_id: str | None = None,
) -> Sequence:
    """Fill a skeleton with catalog poses; the second step of two-phase generation."""
    if not catalog:
        msg = "no poses available to fill the sequence"
        raise CatalogEmptyError(msg)
    if await _usable(backend):
        return await _generate_with_ai(
            params, catalog, backend, config, structure=structure, user_id=user_id,
        )
    return fill_structure_without_ai(
        structure, params, catalog, user_id=user_id, min_poses=config.generation.min_fallback_poses,
    )


async def create_skeleton(
    params: GenerationParams,
    store: SequenceStore,
    backend: TextBackend | None,
    config: AppConfig,
    *,
    user_id: str | None = None,
) -> tuple[SequenceStructure, Sequence]:
    """Generate a skeleton and store it as a ``structure_only`` sequence."""
    structure = await generate_structure(params, backend, config)
    skeleton = skeleton_sequence(structure, params, user_id=user_id)
    store.save_sequence(skeleton)
    return structure, skeleton


def _stored_skeleton(
    store: SequenceStore, sequence_id: str, user_id: str | None,
) -> Sequence | None:
    """Return the stored sequence *sequence_id* if *user_id* may fill it."""
    try:
        existing = store.get_sequence(sequence_id)
    except NotFoundError:
        return None
    if existing.user_id is not None and existing.user_id != user_id:
        msg = f"sequence {sequence_id} belongs to another user"
        raise AuthorizationError(msg, authenticated=user_id is not None)
    return existing


async def complete_poses(
    sequence_id: str,
    structure: SequenceStructure,
    params: GenerationParams,
    store: SequenceStore,
    backend: TextBackend | None,
    config: AppConfig,
    coalescer: RequestCoalescer,
    *,
    user_id: str | None = None,
) -> Sequence:
    """Fill the skeleton stored as *sequence_id* with poses.

    Concurrent calls by one user for the same *sequence_id* share one run.
    If filling fails for any reason the canned five-phase sequence is used
    instead. Phase ids of the stored skeleton are carried over by index and
    the result keeps *sequence_id*. A stored skeleton is replaced by the filled sequence; an
    unknown *sequence_id* is filled without being persisted.

    Raises
    ------
    AuthorizationError
        If the stored skeleton belongs to another user.
    CatalogEmptyError
        If the catalog has no poses.
    """
    # Checked for every caller, including those that join a shared run.
    existing = _stored_skeleton(store, sequence_id, user_id)

    async def work() -> Sequence:
        catalog = _load_catalog(store)
        try:
            filled = await fill_sequence_with_poses(
                structure, params, catalog, backend, config, user_id=user_id,
            )
        except Exception:
            logger.warning(
                "Filling sequence %s failed; using the canned sequence", sequence_id, exc_info=True,
            )
            filled = build_canned_sequence(sequence_id, params, catalog, user_id=user_id)

        if existing is not None:
            filled = preserve_phase_ids(existing.phases, filled)
            filled.created_at = existing.created_at
            filled.user_id = existing.user_id
        filled.id = sequence_id
        filled.structure_only = False

        if existing is not None:
            store.update_sequence(filled)
        logger.info("Completed poses for sequence %s (%d poses)", sequence_id, filled.pose_count)
        return filled

    return await coalescer.run(f"{sequence_id}:{user_id or ''}", work)


async def generate_cues(
    pose: Pose,
    backend: TextBackend | None,
    config: AppConfig,
    *,
    side: str | None = None,
    existing_cues: str | None = None,
) -> str:
    """Generate a short spoken teaching-cue paragraph for *pose*.

    Raises
    ------
    BackendError
        If no text backend is available or the call fails.
    """
    if not await _usable(backend):
        msg = "text generation backend is unavailable"
        raise BackendError(msg)

    result = await backend.complete(
        TextRequest(
            prompt=build_cues_prompt(pose, side, existing_cues, _guidelines(config)),
            kind="cues",
            system=CUES_SYSTEM_MESSAGE,
            temperature=config.llm.temperature,
            max_tokens=config.llm.cue_max_tokens,
            top_p=0.95,
        )
    )
    return result.text.strip()
