#!/usr/bin/env python3
"""Generate bearer tokens for calling the analytics API by hand."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.deps import issue_smoke_token
from src.core.auth import Role

# Organizers may read event analytics
organizer_token = issue_smoke_token("organizer-test", role=Role.ORGANIZER)
print(f"Organizer Token:\n{organizer_token}\n")

# Workspace analytics only need a member's user id as subject
member_id = sys.argv[1] if len(sys.argv) > 1 else "member-test"
member_token = issue_smoke_token(member_id, role=Role.PARTICIPANT)
print(f"Workspace Member Token ({member_id}):\n{member_token}")
