"""Domain Types — identity types, policies and constants shared by the core.

Invariants:
    - TeamId, UserId, MembershipId wrap UUIDs — never mix them in domain logic
    - BREADCRUMB_SEPARATOR is the only separator used for rendered paths
    - All policy choices encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and parse from query strings without custom code
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TeamId = NewType("TeamId", UUID)
UserId = NewType("UserId", UUID)
MembershipId = NewType("MembershipId", UUID)


# ─── Constants ───────────────────────────────────────────────────

BREADCRUMB_SEPARATOR = " > "
DEFAULT_ROLE = "member"


# ─── Enums ───────────────────────────────────────────────────────

class DeletePolicy(str, Enum):
    """What happens to the children of a team being deleted."""
    REJECT = "reject"        # refuse while the team has children
    REPARENT = "reparent"    # children move up to the deleted team's parent
    CASCADE = "cascade"      # the whole subtree is deleted
