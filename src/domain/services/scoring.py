"""Weighted rubric scoring shared by the event analytics reports."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import structlog
from src.domain.errors import RubricValidationError
from src.domain.models import Criterion, Rubric, Score, Submission

logger = structlog.get_logger(__name__)

# (label, lower bound inclusive, upper bound exclusive); the last bucket also takes 100
SCORE_BUCKETS: tuple[tuple[str, float, float], ...] = (
    ("0-20", 0.0, 20.0),
    ("20-40", 20.0, 40.0),
    ("40-60", 40.0, 60.0),
    ("60-80", 60.0, 80.0),
    ("80-100", 80.0, 100.0),
)


def validate_rubric(rubric: Rubric, *, expected_weight_total: float = 100.0) -> None:
    """Reject rubrics that cannot be scored and warn on weights not summing to the total.

    A weight mismatch only skews the scale of final scores, so it is logged rather
    than raised; buckets clamp out-of-range scores.
    """
    for criterion in rubric.criteria:
        if criterion.max_score <= 0:
            raise RubricValidationError(
                f"Criterion {criterion.id} has non-positive max score {criterion.max_score}"
            )
        if criterion.weight < 0:
            raise RubricValidationError(
                f"Criterion {criterion.id} has negative weight {criterion.weight}"
            )

    weight_total = sum(criterion.weight for criterion in rubric.criteria)
    if not math.isclose(weight_total, expected_weight_total, abs_tol=1e-6):
        logger.warning(
            "rubric_weight_mismatch",
            rubric_id=rubric.id,
            event_id=rubric.event_id,
            weight_total=weight_total,
            expected=expected_weight_total,
        )


def weighted_judge_score(score: Score, criteria: Sequence[Criterion]) -> float:
    """Sum of each criterion's normalized raw score times its weight."""
    total = 0.0
    for criterion in criteria:
        raw = score.scores.get(criterion.id) or 0.0
        total += (raw / criterion.max_score) * criterion.weight
    return total


def final_submission_score(submission: Submission, criteria: Sequence[Criterion]) -> float | None:
    """Average the weighted totals across judges; None when nobody scored it."""
    if not submission.scores:
        return None
    judge_totals = [weighted_judge_score(score, criteria) for score in submission.scores]
    return sum(judge_totals) / len(judge_totals)


def final_scores(submissions: Iterable[Submission], rubric: Rubric) -> list[float]:
    """Final scores of every submission that has at least one judge score."""
    scored: list[float] = []
    for submission in submissions:
        final = final_submission_score(submission, rubric.criteria)
        if final is not None:
            scored.append(final)
    return scored


def bucket_label(score: float) -> str:
    """Return the distribution bucket for a final score.

    Scores outside 0-100 (possible with malformed rubrics) land in the nearest edge
    bucket so that counts always add up to the number of scored submissions.
    """
    for label, lower, upper in SCORE_BUCKETS:
        if lower <= score < upper:
            return label
    if score < SCORE_BUCKETS[0][1]:
        return SCORE_BUCKETS[0][0]
    return SCORE_BUCKETS[-1][0]
