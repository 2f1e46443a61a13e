# src/crew_deck/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    invites_router,
    karma_router,
    moderation_router,
    posts_router,
    roles_router,
    stations_router,
)

__all__ = [
    "stations_router",
    "roles_router",
    "moderation_router",
    "invites_router",
    "posts_router",
    "comments_router",
    "karma_router",
]
