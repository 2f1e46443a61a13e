# src/crew_deck/api/v1/endpoints/comments.py
"""Comment endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from crew_deck.models import Comment
from crew_deck.schemas.post import CommentResponse, CommentUpdate, DeleteResponse
from crew_deck.schemas.vote import MyVoteResponse, VoteCreate, VoteResult
from crew_deck.services import content, votes

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch("/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Comment:
    return content.edit_comment(db, comment_id, principal, comment_data.content)


@router.delete("/{comment_id}", response_model=DeleteResponse)
async def delete_comment(
    comment_id: int,
    principal: PrincipalDep,
    db: SessionDep,
) -> DeleteResponse:
    """Delete a comment and every reply beneath it."""
    deleted = content.delete_comment(db, comment_id, principal)
    return DeleteResponse(deleted=deleted)


@router.post("/{comment_id}/vote", response_model=VoteResult)
async def vote_on_comment(
    comment_id: int,
    vote_data: VoteCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> VoteResult:
    action = votes.vote_on_comment(db, comment_id, principal, vote_data.direction)
    return VoteResult(action=action)


@router.get("/{comment_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    comment_id: int,
    principal: PrincipalDep,
    db: SessionDep,
) -> MyVoteResponse:
    direction = votes.get_my_comment_vote(db, comment_id, principal)
    return MyVoteResponse(voted=direction is not None, direction=direction)
