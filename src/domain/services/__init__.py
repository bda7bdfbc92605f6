"""Domain services."""

from src.domain.services.collaboration import NullCollaborationDataSource
from src.domain.services.event_analytics import EventAnalyticsService
from src.domain.services.workspace_analytics import WorkspaceAnalyticsService

__all__ = [
    "EventAnalyticsService",
    "NullCollaborationDataSource",
    "WorkspaceAnalyticsService",
]
