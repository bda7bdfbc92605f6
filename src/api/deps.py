from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.core.auth import Role, TokenError, create_access_token, decode_access_token
from src.core.config import get_settings
from src.domain import User
from src.domain.errors import ComputationError
from src.domain.services import EventAnalyticsService, WorkspaceAnalyticsService
from src.infrastructure.db.session import get_session_factory
from src.infrastructure.repositories import SqlEventRecordStore, SqlWorkspaceRecordStore

bearer_scheme = HTTPBearer(auto_error=False)

SessionFactory = async_sessionmaker[AsyncSession]


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated user from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    if not claims.roles:
        raise _forbidden("Token missing required roles")

    return User(user_id=claims.subject, email=claims.email, roles=list(claims.roles))


def require_roles(*roles: Role) -> Callable[[User], User]:
    """Dependency that admits users holding at least one of ``roles``.

    Roles switched off through ``ALLOWED_ROLES`` fail at import time rather than
    silently locking every caller out of a report.
    """
    disabled = [role.value for role in roles if role.value not in get_settings().allowed_roles]
    if disabled:
        raise ValueError(f"Role(s) not enabled for this deployment: {', '.join(disabled)}")

    accepted = frozenset(role.value for role in roles)

    def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if accepted.isdisjoint(user.roles):
            raise _forbidden("Insufficient role privileges")
        return user

    return dependency


def issue_smoke_token(user_id: str, *, role: Role, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, roles=[role], email=email)


def get_db_session_factory() -> SessionFactory:
    """Session factory handed to the record stores; overridden in tests."""
    return get_session_factory()


def get_event_analytics_service(
    session_factory: SessionFactory = Depends(get_db_session_factory),  # noqa: B008
) -> EventAnalyticsService:
    return EventAnalyticsService(SqlEventRecordStore(session_factory))


def get_workspace_analytics_service(
    session_factory: SessionFactory = Depends(get_db_session_factory),  # noqa: B008
) -> WorkspaceAnalyticsService:
    return WorkspaceAnalyticsService(SqlWorkspaceRecordStore(session_factory))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def computation_failed(exc: ComputationError) -> HTTPException:
    """500 naming the failed branch; the underlying store error stays in the logs."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Analytics computation failed during {exc.operation}",
    )
