"""Read pose catalog files (JSON or CSV) for out-of-band import."""

from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from yogaflow.models.pose import Pose

logger = logging.getLogger(__name__)

# Starter catalog shipped with the package.
STARTER_CATALOG = Path(__file__).resolve().parent / "starter_poses.json"

_TRUE = {"true", "yes", "1", "y"}
_FALSE = {"false", "no", "0", "n", ""}


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _normalise_record(record: dict[str, Any]) -> dict[str, Any]:
    data = {k.strip(): v for k, v in record.items() if k}
    # Older exports call the English name just "name".
    if not data.get("english_name") and data.get("name"):
        data["english_name"] = data.pop("name")
    if not data.get("id") and data.get("english_name"):
        data["id"] = slugify(str(data["english_name"]))

    side = data.get("side_option")
    if isinstance(side, str) and side.strip().lower() in _TRUE:
        data["side_option"] = True
    elif isinstance(side, str) and side.strip().lower() in _FALSE:
        data["side_option"] = False

    tags = data.get("tags")
    if isinstance(tags, str):
        data["tags"] = [t.strip() for t in tags.split(";") if t.strip()]

    # Empty CSV cells mean "not set".
    return {k: (None if v == "" and k != "tags" else v) for k, v in data.items()}


def load_pose_file(path: Path) -> list[Pose]:
    """Load poses from a ``.json`` array (or ``{"poses": [...]}``) or a ``.csv`` file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file type is unsupported or a record is invalid.
    """
    if not path.exists():
        msg = f"Pose file not found: {path}"
        raise FileNotFoundError(msg)

    suffix = path.suffix.lower()
    if suffix == ".json":
        raw = json.loads(path.read_text(encoding="utf-8"))
        records = raw.get("poses", []) if isinstance(raw, dict) else raw
    elif suffix == ".csv":
        with path.open(newline="", encoding="utf-8") as fh:
            records = list(csv.DictReader(fh))
    else:
        msg = f"Unsupported pose file type '{suffix}' (expected .json or .csv)"
        raise ValueError(msg)

    poses: list[Pose] = []
    for idx, record in enumerate(records, start=1):
        try:
            poses.append(Pose.model_validate(_normalise_record(record)))
        except ValidationError as exc:
            msg = f"Invalid pose record #{idx} in {path.name}: {exc}"
            raise ValueError(msg) from exc

    logger.info("Loaded %d poses from %s", len(poses), path)
    return poses
