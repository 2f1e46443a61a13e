# src/crew_deck/schemas/vote.py
"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel


class VoteCreate(BaseModel):
    """Schema for casting a vote on a post or comment."""

    direction: Literal["up", "down"]


class VoteResult(BaseModel):
    action: Literal["upvoted", "downvoted", "removed", "changed"]


class MyVoteResponse(BaseModel):
    """The caller's current vote; ``direction`` is None when not voted."""

    voted: bool
    direction: Literal["up", "down"] | None = None
