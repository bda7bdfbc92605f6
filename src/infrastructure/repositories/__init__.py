"""SQL implementations of the analytics record stores."""

from src.infrastructure.repositories.event_records import SqlEventRecordStore
from src.infrastructure.repositories.workspace_records import SqlWorkspaceRecordStore

__all__ = ["SqlEventRecordStore", "SqlWorkspaceRecordStore"]
