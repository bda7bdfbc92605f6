"""Domain records, reports and services for event analytics."""

from src.domain.models import User

__all__ = ["User"]
