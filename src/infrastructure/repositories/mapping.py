"""Row-to-record conversion helpers shared by the SQL record stores."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from src.domain.models import Criterion


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps (SQLite drops tzinfo) and normalize aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def criterion_from_json(payload: dict[str, Any]) -> Criterion:
    """Criteria are stored with camelCase keys by the judging service."""
    max_score = payload.get("maxScore", payload.get("max_score"))
    return Criterion(
        id=str(payload["id"]),
        name=str(payload.get("name", "")),
        max_score=float(max_score) if max_score is not None else 0.0,
        weight=float(payload.get("weight", 0.0)),
    )


def raw_scores_from_json(payload: dict[str, Any] | None) -> dict[str, float]:
    if not payload:
        return {}
    return {str(key): float(value) for key, value in payload.items() if value is not None}
