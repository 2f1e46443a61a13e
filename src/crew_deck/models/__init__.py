# src/crew_deck/models/__init__.py
"""SQLAlchemy models for the Crew Deck service."""

from .audit import AuditLogEntry
from .invite import Invite
from .karma import KarmaLedgerEntry
from .moderation import ModerationAction
from .post import Comment, Post
from .role import Capability, Role
from .station import Membership, Station
from .vote import CommentVote, PostVote

__all__ = [
    "AuditLogEntry",
    "Capability",
    "Comment",
    "CommentVote",
    "Invite",
    "KarmaLedgerEntry",
    "Membership",
    "ModerationAction",
    "Post",
    "PostVote",
    "Role",
    "Station",
]
