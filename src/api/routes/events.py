from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from src.api.deps import computation_failed, get_event_analytics_service, require_roles
from src.api.schemas.analytics import (
    EventAnalyticsResponse,
    JudgeParticipationItem,
    RegistrationOverTimeItem,
    ScoreDistributionItem,
    SessionCheckInRateItem,
)
from src.core.auth import Role
from src.domain import User
from src.domain.errors import ComputationError, EventNotFoundError, RubricValidationError
from src.domain.services import EventAnalyticsService
from src.domain.services.fanout import guard_read

router = APIRouter(prefix="/events", tags=["Event Analytics"])
logger = structlog.get_logger()

_ANALYTICS_ROLES = (Role.ORGANIZER, Role.ADMIN)


@router.get("/{event_id}/analytics", response_model=EventAnalyticsResponse)
async def get_event_analytics(
    event_id: str,
    service: EventAnalyticsService = Depends(get_event_analytics_service),
    user: User = Depends(require_roles(*_ANALYTICS_ROLES)),
) -> EventAnalyticsResponse:
    """
    Comprehensive analytics report for an event.

    - Registration trend, session check-in rates, score distribution
      and judge participation
    - Summary block with totals and the average weighted score
    """
    try:
        report = await service.get_comprehensive_report(event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RubricValidationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ComputationError as exc:
        raise computation_failed(exc) from exc

    await logger.ainfo("event_analytics_served", event_id=event_id, user_id=user.user_id)
    return EventAnalyticsResponse.model_validate(report)


@router.get(
    "/{event_id}/analytics/registrations",
    response_model=list[RegistrationOverTimeItem],
)
async def get_registration_trend(
    event_id: str,
    service: EventAnalyticsService = Depends(get_event_analytics_service),
    _: User = Depends(require_roles(*_ANALYTICS_ROLES)),
) -> list[RegistrationOverTimeItem]:
    try:
        trend = await guard_read(
            "registrations_over_time", service.calculate_registrations_over_time(event_id)
        )
    except ComputationError as exc:
        raise computation_failed(exc) from exc
    return [RegistrationOverTimeItem.model_validate(item) for item in trend]


@router.get(
    "/{event_id}/analytics/check-ins",
    response_model=list[SessionCheckInRateItem],
)
async def get_check_in_rates(
    event_id: str,
    service: EventAnalyticsService = Depends(get_event_analytics_service),
    _: User = Depends(require_roles(*_ANALYTICS_ROLES)),
) -> list[SessionCheckInRateItem]:
    try:
        rates = await guard_read(
            "check_in_rates", service.calculate_check_in_rates_by_session(event_id)
        )
    except ComputationError as exc:
        raise computation_failed(exc) from exc
    return [SessionCheckInRateItem.model_validate(item) for item in rates]


@router.get(
    "/{event_id}/analytics/scores",
    response_model=list[ScoreDistributionItem],
)
async def get_score_distribution(
    event_id: str,
    service: EventAnalyticsService = Depends(get_event_analytics_service),
    _: User = Depends(require_roles(*_ANALYTICS_ROLES)),
) -> list[ScoreDistributionItem]:
    try:
        buckets = await guard_read(
            "score_distributions", service.calculate_score_distributions(event_id)
        )
    except RubricValidationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ComputationError as exc:
        raise computation_failed(exc) from exc
    return [ScoreDistributionItem.model_validate(item) for item in buckets]


@router.get(
    "/{event_id}/analytics/judges",
    response_model=list[JudgeParticipationItem],
)
async def get_judge_participation(
    event_id: str,
    service: EventAnalyticsService = Depends(get_event_analytics_service),
    _: User = Depends(require_roles(*_ANALYTICS_ROLES)),
) -> list[JudgeParticipationItem]:
    try:
        judges = await guard_read(
            "judge_participation", service.aggregate_judge_participation(event_id)
        )
    except ComputationError as exc:
        raise computation_failed(exc) from exc
    return [JudgeParticipationItem.model_validate(item) for item in judges]
