"""Map model-suggested pose names onto catalog poses."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from yogaflow.errors import CatalogEmptyError, MatchError
from yogaflow.models.enums import UnmatchedPosePolicy
from yogaflow.models.pose import Pose

logger = logging.getLogger(__name__)


def first_token(name: str) -> str:
    """Return the first space-delimited word of *name*, lower-cased."""
    parts = name.strip().split()
    return parts[0].lower() if parts else ""


def find_pose(name: str, catalog: Sequence[Pose]) -> Pose | None:
    """Return the first catalog pose whose English name contains the first word of *name*.

    Matching is a case-insensitive substring test on the first token only, so
    "Warrior I Variation" matches the first catalog entry containing
    "warrior", whichever Warrior that is. Ties go to catalog order.
    """
    token = first_token(name)
    if not token:
        return None
    for pose in catalog:
        if token in pose.english_name.lower():
            return pose
    return None


def match_pose(
    name: str,
    catalog: Sequence[Pose],
    policy: UnmatchedPosePolicy = UnmatchedPosePolicy.FIRST_IN_CATALOG,
) -> Pose | None:
    """Resolve a suggested pose name to a catalog pose.

    When nothing matches, *policy* decides: ``FIRST_IN_CATALOG`` substitutes
    the first catalog pose, ``SKIP`` returns ``None`` and ``RAISE`` raises
    :class:`MatchError`.

    Raises
    ------
    CatalogEmptyError
        If *catalog* is empty.
    MatchError
        If nothing matches and *policy* is ``RAISE``.
    """
    if not catalog:
        msg = "pose catalog is empty"
        raise CatalogEmptyError(msg)

    pose = find_pose(name, catalog)
    if pose is not None:
        return pose

    if policy is UnmatchedPosePolicy.RAISE:
        msg = f"no catalog pose matches '{name}'"
        raise MatchError(msg)
    if policy is UnmatchedPosePolicy.SKIP:
        logger.warning("No catalog pose matches '%s'; skipping it", name)
        return None

    substitute = catalog[0]
    logger.warning(
        "No catalog pose matches '%s'; substituting first catalog pose '%s'",
        name, substitute.english_name,
    )
    return substitute
