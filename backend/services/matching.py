"""Tech Stack Compatibility Scoring.

Compares a developer's demonstrated technology stack against a target
stack (company or job requirements) and produces a percentage score with
the matched and missing skills.

Scoring is a pure function: no I/O, no shared state. Results are safe to
compute concurrently and to cache.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

# Score band thresholds (inclusive lower bounds)
BAND_STRONG = 80
BAND_MODERATE = 60


@dataclass(frozen=True)
class MatchResult:
    """Outcome of comparing a candidate stack with a required stack."""

    score: int
    matched_skills: tuple[str, ...] = field(default_factory=tuple)
    missing_skills: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape consumed by clients."""
        return {
            "score": self.score,
            "matchedSkills": list(self.matched_skills),
            "missingSkills": list(self.missing_skills),
        }


def _normalize(skill: str) -> str:
    # Skill labels are ASCII in practice ("Go", "React"), plain lower() is enough.
    return skill.lower()


def _round_half_up(value: float) -> int:
    """Round a non-negative value with .5 going up.

    Built-in round() uses banker's rounding (12.5 -> 12), which would
    disagree with the scores shown to users elsewhere.
    """
    return math.floor(value + 0.5)


def calculate_compatibility(
    candidate_skills: Iterable[str],
    required_skills: Sequence[str],
) -> MatchResult:
    """Score how well ``candidate_skills`` cover ``required_skills``.

    Skills are compared case-insensitively. Matched and missing skills keep
    the order and original casing of ``required_skills``; duplicate
    required entries are each scored on their own.

    An empty requirement list is fully satisfied by any candidate:
    score 100 with no matched or missing skills.
    """
    if not required_skills:
        return MatchResult(score=100)

    known = {_normalize(skill) for skill in candidate_skills}

    matched: list[str] = []
    missing: list[str] = []
    for skill in required_skills:
        if _normalize(skill) in known:
            matched.append(skill)
        else:
            missing.append(skill)

    raw_score = len(matched) / len(required_skills) * 100

    return MatchResult(
        score=_round_half_up(raw_score),
        matched_skills=tuple(matched),
        missing_skills=tuple(missing),
    )


def score_band(score: int) -> str:
    """Classify a compatibility score for display."""
    if score >= BAND_STRONG:
        return "strong"
    if score >= BAND_MODERATE:
        return "moderate"
    return "developing"
