"""Error taxonomy shared by the analytics services."""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for analytics engine errors."""


class NotFoundError(AnalyticsError):
    """Raised when the requested event or workspace does not exist."""


class EventNotFoundError(NotFoundError):
    """Raised when event does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class WorkspaceNotFoundError(NotFoundError):
    """Raised when workspace does not exist."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(f"Workspace {workspace_id} not found")
        self.workspace_id = workspace_id


class AccessDeniedError(AnalyticsError):
    """Raised when the caller may not see the requested analytics."""


class WorkspaceAccessDeniedError(AccessDeniedError):
    """Raised when user is not a member of the workspace."""

    def __init__(self, workspace_id: str, user_id: str) -> None:
        super().__init__("Access denied: User is not a member of this workspace")
        self.workspace_id = workspace_id
        self.user_id = user_id


class ComputationError(AnalyticsError):
    """Raised when a record store read fails while a report is being computed."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause.__class__.__name__}")
        self.operation = operation
        self.cause = cause


class DegradedMetricError(AnalyticsError):
    """Raised by a data source that cannot provide a non-essential metric."""

    def __init__(self, metric: str, reason: str = "data source not configured") -> None:
        super().__init__(f"{metric} unavailable: {reason}")
        self.metric = metric
        self.reason = reason


class RubricValidationError(AnalyticsError):
    """Raised when a rubric cannot produce meaningful weighted scores."""
