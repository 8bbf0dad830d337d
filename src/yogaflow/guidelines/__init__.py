"""Bundled yoga teaching guidelines used in prompts."""

from yogaflow.guidelines.loader import DEFAULT_GUIDELINES, guideline_section, load_guidelines

__all__ = ["DEFAULT_GUIDELINES", "guideline_section", "load_guidelines"]
