from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum

import jwt
from src.core.config import get_settings


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class Role(str, Enum):
    ORGANIZER = "organizer"
    JUDGE = "judge"
    PARTICIPANT = "participant"
    ADMIN = "admin"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}


@dataclass(slots=True, frozen=True)
class TokenClaims:
    """Validated claims carried by an access token."""

    subject: str
    roles: tuple[str, ...]
    expires_at: datetime
    email: str = ""
    issuer: str | None = None
    extra: dict = field(default_factory=dict)

    def to_payload(self, issued_at: datetime) -> dict:
        payload = {
            **self.extra,
            "sub": self.subject,
            "roles": list(self.roles),
            "iat": int(issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }
        if self.issuer:
            payload["iss"] = self.issuer
        if self.email:
            payload["email"] = self.email
        return payload


def create_access_token(
    subject: str,
    *,
    roles: Iterable[Role | str],
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign an access token for ``subject``; roles must be enabled in ``ALLOWED_ROLES``."""
    settings = get_settings()
    role_values = tuple(role.value if isinstance(role, Role) else role for role in roles)
    rejected = [role for role in role_values if role not in settings.allowed_roles]
    if rejected:
        raise TokenError(f"Unsupported role(s): {', '.join(rejected)}")

    issued_at = datetime.now(UTC)
    claims = TokenClaims(
        subject=subject,
        roles=role_values,
        expires_at=issued_at
        + (expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)),
        email=email or "",
        issuer=settings.app_name,
    )
    return jwt.encode(
        claims.to_payload(issued_at), settings.jwt_secret, algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str) -> TokenClaims:
    """Decode a bearer token and return its validated claims."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "roles", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token expired") from exc
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    roles = payload.get("roles") or []
    unknown = [role for role in roles if not Role.contains(role)]
    if unknown:
        raise TokenError(f"Unsupported role: {unknown[0]}")

    known_keys = {"sub", "roles", "exp", "iat", "iss", "email"}
    return TokenClaims(
        subject=str(payload["sub"]),
        roles=tuple(roles),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        email=payload.get("email", ""),
        issuer=payload.get("iss"),
        extra={key: value for key, value in payload.items() if key not in known_keys},
    )
