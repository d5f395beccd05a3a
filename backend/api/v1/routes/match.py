"""Tech stack compatibility endpoints.

POST /api/v1/match           - Score a candidate stack against a required stack
POST /api/v1/match/projects  - Score a stack derived from project analyses
POST /api/v1/match/batch     - Score one candidate stack against several targets
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from api.deps import ensure_skill_list_size, rate_limit_match
from app.config import get_settings
from app.exceptions import ValidationError
from app.logging_config import get_logger
from app.metrics import MATCH_SCORE, MATCHES_TOTAL
from services.matching import MatchResult, calculate_compatibility, score_band
from services.tech_stack import (
    DEFAULT_ANALYSIS_LIMIT,
    collect_candidate_stack,
    stack_from_languages,
)

logger = get_logger(__name__)
router = APIRouter()


class MatchRequest(BaseModel):
    """Direct compatibility request."""

    candidate_skills: list[str]
    required_skills: list[str]


class MatchResponse(BaseModel):
    """Compatibility result."""

    model_config = ConfigDict(populate_by_name=True)

    score: int
    matched_skills: list[str] = Field(alias="matchedSkills")
    missing_skills: list[str] = Field(alias="missingSkills")


class ProjectAnalysis(BaseModel):
    """The part of a stored project analysis used for matching."""

    tech_stack: list[str] | None = Field(None, alias="techStack")


class LanguageShare(BaseModel):
    """One entry of an aggregated repository language breakdown."""

    name: str = Field(..., min_length=1)
    count: int = Field(0, ge=0)
    percentage: float = Field(0.0, ge=0.0, le=100.0)


class ProjectMatchRequest(BaseModel):
    """Compatibility request with the candidate stack derived server-side."""

    analyses: list[ProjectAnalysis]
    languages: list[LanguageShare] | None = None
    min_language_percentage: float = Field(0.0, ge=0.0, le=100.0)
    required_skills: list[str]


class ProjectMatchResponse(MatchResponse):
    """Compatibility result with the derived candidate stack."""

    band: str
    candidate_skills: list[str] = Field(alias="candidateSkills")


class MatchTarget(BaseModel):
    """A single requirement set, e.g. one company."""

    id: str = Field(..., min_length=1, max_length=100)
    required_skills: list[str]


class BatchMatchRequest(BaseModel):
    """One candidate scored against many targets."""

    candidate_skills: list[str]
    targets: list[MatchTarget]


class TargetMatch(MatchResponse):
    """Compatibility result for one target."""

    id: str
    band: str


class BatchMatchResponse(BaseModel):
    """Results ordered best match first."""

    results: list[TargetMatch]


def _record(result: MatchResult, endpoint: str) -> None:
    MATCHES_TOTAL.labels(endpoint=endpoint).inc()
    MATCH_SCORE.observe(result.score)


@router.post("/match", response_model=MatchResponse)
async def match_skills(
    request: MatchRequest,
    _rate_limit: None = Depends(rate_limit_match),
) -> MatchResponse:
    """Score how well a candidate stack covers a required stack.

    Skills are compared case-insensitively. An empty requirement list
    always scores 100.
    """
    ensure_skill_list_size("candidate_skills", request.candidate_skills)
    ensure_skill_list_size("required_skills", request.required_skills)

    result = calculate_compatibility(request.candidate_skills, request.required_skills)
    _record(result, "match")

    logger.info(
        "match_calculated",
        candidate_count=len(request.candidate_skills),
        required_count=len(request.required_skills),
        score=result.score,
    )
    return MatchResponse(
        score=result.score,
        matched_skills=list(result.matched_skills),
        missing_skills=list(result.missing_skills),
    )


@router.post("/match/projects", response_model=ProjectMatchResponse)
async def match_projects(
    request: ProjectMatchRequest,
    _rate_limit: None = Depends(rate_limit_match),
) -> ProjectMatchResponse:
    """Score the stack demonstrated by recent project analyses.

    Uses the tech stacks of the first five analyses (most recent first),
    optionally extended with languages from a repository breakdown.
    """
    ensure_skill_list_size("required_skills", request.required_skills)

    candidate = collect_candidate_stack(
        [a.model_dump(by_alias=True) for a in request.analyses],
        limit=DEFAULT_ANALYSIS_LIMIT,
    )
    if request.languages:
        languages = stack_from_languages(
            [lang.model_dump() for lang in request.languages],
            min_percentage=request.min_language_percentage,
        )
        candidate.extend(lang for lang in languages if lang not in candidate)
    ensure_skill_list_size("candidate_skills", candidate)

    result = calculate_compatibility(candidate, request.required_skills)
    _record(result, "match_projects")

    logger.info(
        "project_match_calculated",
        analyses=len(request.analyses),
        candidate_count=len(candidate),
        required_count=len(request.required_skills),
        score=result.score,
    )
    return ProjectMatchResponse(
        score=result.score,
        matched_skills=list(result.matched_skills),
        missing_skills=list(result.missing_skills),
        band=score_band(result.score),
        candidate_skills=candidate,
    )


@router.post("/match/batch", response_model=BatchMatchResponse)
async def match_batch(
    request: BatchMatchRequest,
    _rate_limit: None = Depends(rate_limit_match),
) -> BatchMatchResponse:
    """Score one candidate stack against several requirement sets.

    Results are sorted by score, highest first; equal scores keep
    request order.
    """
    settings = get_settings()
    if len(request.targets) > settings.max_batch_targets:
        raise ValidationError(
            "Too many targets in batch",
            details={
                "field": "targets",
                "max_items": settings.max_batch_targets,
                "received": len(request.targets),
            },
        )
    ensure_skill_list_size("candidate_skills", request.candidate_skills)
    for target in request.targets:
        ensure_skill_list_size("required_skills", target.required_skills)

    results: list[TargetMatch] = []
    for target in request.targets:
        result = calculate_compatibility(request.candidate_skills, target.required_skills)
        _record(result, "match_batch")
        results.append(
            TargetMatch(
                id=target.id,
                score=result.score,
                matched_skills=list(result.matched_skills),
                missing_skills=list(result.missing_skills),
                band=score_band(result.score),
            )
        )

    results.sort(key=lambda r: r.score, reverse=True)
    logger.info(
        "batch_match_calculated",
        targets=len(results),
        best_score=results[0].score if results else None,
    )
    return BatchMatchResponse(results=results)
