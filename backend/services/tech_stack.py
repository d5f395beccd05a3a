"""Candidate Tech Stack Derivation.

Builds the candidate skill list fed into compatibility scoring, either
from recent project analyses or from a repository language breakdown.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

# Only the most recent analyses describe the developer's current stack
DEFAULT_ANALYSIS_LIMIT = 5


def collect_candidate_stack(
    analyses: Iterable[Mapping[str, Any]],
    limit: int = DEFAULT_ANALYSIS_LIMIT,
) -> list[str]:
    """Union the ``techStack`` lists of up to ``limit`` project analyses.

    Skills keep first-seen order. De-duplication is exact-string; casing
    differences are left to the scorer, which compares case-insensitively.
    Analyses without a ``techStack`` list contribute nothing.
    """
    seen: dict[str, None] = {}
    for index, analysis in enumerate(analyses):
        if index >= limit:
            break
        stack = analysis.get("techStack")
        if not isinstance(stack, list):
            continue
        for skill in stack:
            if isinstance(skill, str):
                seen.setdefault(skill, None)
    return list(seen)


def stack_from_languages(
    languages: Iterable[Mapping[str, Any]],
    min_percentage: float = 0.0,
) -> list[str]:
    """Extract language names from an aggregated language breakdown.

    Expects entries shaped like ``{"name": "Python", "count": 4,
    "percentage": 57.1}``. Names are ordered by percentage (highest first)
    and entries below ``min_percentage`` are dropped.
    """
    usable = [
        lang
        for lang in languages
        if lang.get("name") and float(lang.get("percentage", 0.0)) >= min_percentage
    ]
    ranked = sorted(
        usable, key=lambda lang: float(lang.get("percentage", 0.0)), reverse=True
    )
    return [lang["name"] for lang in ranked]
