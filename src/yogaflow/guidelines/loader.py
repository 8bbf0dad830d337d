"""Load the instructional guideline text used to build prompts."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

# Directory containing the bundled guideline markdown.
_GUIDELINES_DIR = Path(__file__).resolve().parent
DEFAULT_GUIDELINES = _GUIDELINES_DIR / "yoga_guidelines.md"


@lru_cache(maxsize=8)
def _read_guidelines(path: Path) -> str:
    text = path.read_text(encoding="utf-8")
    logger.debug("Loaded yoga guidelines from %s (%d chars)", path, len(text))
    return text


def load_guidelines(path: Path | None = None) -> str:
    """Return the guideline markdown at *path* (default: the bundled file).

    A missing or unreadable file is logged and yields an empty string so that
    generation can proceed without guidelines. Only successful reads are
    cached, so a file that appears later is picked up.
    """
    path = path or DEFAULT_GUIDELINES
    try:
        return _read_guidelines(path)
    except OSError as exc:
        logger.warning("Could not read yoga guidelines at %s: %s", path, exc)
        return ""


def guideline_section(text: str, heading: str) -> str:
    """Return the body of the ``## heading`` section of *text*, or ``""``.

    The section runs until the next heading of the same or higher level.
    """
    pattern = re.compile(rf"^##\s+{re.escape(heading)}\s*$", re.MULTILINE | re.IGNORECASE)
    m = pattern.search(text)
    if not m:
        return ""
    rest = text[m.end():]
    end = re.search(r"^#{1,2}\s", rest, re.MULTILINE)
    return (rest[: end.start()] if end else rest).strip()
