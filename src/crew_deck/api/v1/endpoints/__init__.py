"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .invites import router as invites_router
from .karma import router as karma_router
from .moderation import router as moderation_router
from .posts import router as posts_router
from .roles import router as roles_router
from .stations import router as stations_router

__all__ = [
    "stations_router",
    "roles_router",
    "moderation_router",
    "invites_router",
    "posts_router",
    "comments_router",
    "karma_router",
]
