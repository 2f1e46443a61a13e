# src/crew_deck/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .invite import InviteCreate, InviteRedeem, InviteRedeemResponse, InviteResponse
from .karma import KarmaResponse, StationKarmaResponse
from .moderation import (
    AuditLogEntryResponse,
    BanRequest,
    LiftResponse,
    MemberStatusResponse,
    ModerationActionResponse,
    MuteRequest,
)
from .post import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdate,
    DeleteResponse,
    PinRequest,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from .role import RoleAssign, RoleCreate, RoleDeleteResponse, RoleResponse, RoleUpdate
from .station import (
    MembershipResponse,
    StationCreate,
    StationMembershipResponse,
    StationResponse,
    StationUpdate,
)
from .vote import MyVoteResponse, VoteCreate, VoteResult

__all__ = [
    "AuditLogEntryResponse", "BanRequest", "LiftResponse",
    "MemberStatusResponse", "ModerationActionResponse", "MuteRequest",
    "CommentCreate", "CommentResponse", "CommentThreadResponse", "CommentUpdate",
    "DeleteResponse", "PinRequest", "PostCreate", "PostResponse", "PostUpdate",
    "InviteCreate", "InviteRedeem", "InviteRedeemResponse", "InviteResponse",
    "KarmaResponse", "StationKarmaResponse",
    "RoleAssign", "RoleCreate", "RoleDeleteResponse", "RoleResponse", "RoleUpdate",
    "MembershipResponse", "StationCreate", "StationMembershipResponse",
    "StationResponse", "StationUpdate",
    "MyVoteResponse", "VoteCreate", "VoteResult",
]
