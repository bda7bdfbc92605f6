from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from src.api.deps import computation_failed, get_current_user, get_workspace_analytics_service
from src.api.schemas.analytics import HealthIndicatorsResponse, WorkspaceAnalyticsResponse
from src.domain import User
from src.domain.errors import (
    ComputationError,
    WorkspaceAccessDeniedError,
    WorkspaceNotFoundError,
)
from src.domain.services import WorkspaceAnalyticsService
from src.domain.services.fanout import guard_read

router = APIRouter(prefix="/workspaces", tags=["Workspace Analytics"])
logger = structlog.get_logger()


@router.get("/{workspace_id}/analytics", response_model=WorkspaceAnalyticsResponse)
async def get_workspace_analytics(
    workspace_id: str,
    service: WorkspaceAnalyticsService = Depends(get_workspace_analytics_service),
    user: User = Depends(get_current_user),
) -> WorkspaceAnalyticsResponse:
    """
    Health and workload report for a workspace.

    Only members of the workspace may request it; membership is checked
    before any task or team data is read.
    """
    try:
        report = await service.get_workspace_analytics(workspace_id, user.user_id)
    except WorkspaceAccessDeniedError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except WorkspaceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ComputationError as exc:
        raise computation_failed(exc) from exc

    return WorkspaceAnalyticsResponse.model_validate(report)


@router.get("/{workspace_id}/analytics/health", response_model=HealthIndicatorsResponse)
async def get_workspace_health(
    workspace_id: str,
    service: WorkspaceAnalyticsService = Depends(get_workspace_analytics_service),
    user: User = Depends(get_current_user),
) -> HealthIndicatorsResponse:
    """Health score, bottlenecks and deadline pressure only."""
    try:
        await service.verify_workspace_access(workspace_id, user.user_id)
        indicators = await guard_read(
            "health_indicators", service.calculate_health_indicators(workspace_id)
        )
    except WorkspaceAccessDeniedError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ComputationError as exc:
        raise computation_failed(exc) from exc

    await logger.ainfo(
        "workspace_health_served",
        workspace_id=workspace_id,
        health_score=indicators.health_score,
    )
    return HealthIndicatorsResponse.model_validate(indicators)
