#!/usr/bin/env python3
"""
Print an analytics report as JSON straight from the configured database.

Run with:
    python scripts/print_event_report.py <event_id>
    python scripts/print_event_report.py --workspace <workspace_id> <user_id>
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.errors import AnalyticsError
from src.domain.reports import report_to_dict
from src.domain.services import EventAnalyticsService, WorkspaceAnalyticsService
from src.infrastructure.db.session import dispose_engine, get_session_factory
from src.infrastructure.repositories import SqlEventRecordStore, SqlWorkspaceRecordStore

USAGE = (
    "Usage: python scripts/print_event_report.py <event_id>\n"
    "       python scripts/print_event_report.py --workspace <workspace_id> <user_id>"
)


async def build_report(args: list[str]) -> dict:
    session_factory = get_session_factory()
    if args[0] == "--workspace":
        service = WorkspaceAnalyticsService(SqlWorkspaceRecordStore(session_factory))
        report = await service.get_workspace_analytics(args[1], args[2])
    else:
        service = EventAnalyticsService(SqlEventRecordStore(session_factory))
        report = await service.get_comprehensive_report(args[0])
    return report_to_dict(report)


async def main() -> int:
    args = sys.argv[1:]
    if not args or (args[0] == "--workspace" and len(args) != 3):
        print(USAGE)
        return 2

    setup_logging("WARNING")
    settings = get_settings()
    print(f"Environment: {settings.environment}", file=sys.stderr)

    try:
        payload = await build_report(args)
    except AnalyticsError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1
    finally:
        await dispose_engine()

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
