# src/crew_deck/api/v1/endpoints/posts.py
"""Post endpoints, including votes and the threaded comment view."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from crew_deck.models import Comment, Post
from crew_deck.schemas.post import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
    DeleteResponse,
    PinRequest,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from crew_deck.schemas.vote import MyVoteResponse, VoteCreate, VoteResult
from crew_deck.services import content, votes

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(tags=["posts"])


@router.get("/stations/{station_id}/posts", response_model=list[PostResponse])
async def list_posts(
    station_id: int,
    db: SessionDep,
    limit: int | None = Query(None, ge=1),
    post_type: str | None = Query(None, min_length=1, max_length=30),
) -> list[Post]:
    """List a station's posts, pinned first, optionally of one type."""
    return list(content.list_posts(db, station_id, limit, post_type=post_type))


@router.post(
    "/stations/{station_id}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    station_id: int,
    post_data: PostCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Post:
    """Create a new post in a station."""
    return content.create_post(
        db,
        station_id,
        principal,
        post_type=post_data.post_type,
        title=post_data.title,
        content=post_data.content,
    )


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep) -> Post:
    return content.get_post(db, post_id)


@router.patch("/posts/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: int,
    post_data: PostUpdate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Post:
    return content.edit_post(
        db, post_id, principal, title=post_data.title, content=post_data.content
    )


@router.post("/posts/{post_id}/pin", response_model=PostResponse)
async def pin_post(
    post_id: int,
    pin: PinRequest,
    principal: PrincipalDep,
    db: SessionDep,
) -> Post:
    """Pin or unpin a post."""
    return content.pin_post(db, post_id, principal, pinned=pin.pinned)


@router.delete("/posts/{post_id}", response_model=DeleteResponse)
async def delete_post(post_id: int, principal: PrincipalDep, db: SessionDep) -> DeleteResponse:
    """Delete a post together with its comments and votes."""
    removed_comments = content.delete_post(db, post_id, principal)
    return DeleteResponse(deleted=removed_comments + 1)


@router.post("/posts/{post_id}/vote", response_model=VoteResult)
async def vote_on_post(
    post_id: int,
    vote_data: VoteCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> VoteResult:
    """Vote on a post. Repeating the same vote removes it."""
    action = votes.vote_on_post(db, post_id, principal, vote_data.direction)
    return VoteResult(action=action)


@router.get("/posts/{post_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(post_id: int, principal: PrincipalDep, db: SessionDep) -> MyVoteResponse:
    """Get the caller's vote on a post."""
    direction = votes.get_my_post_vote(db, post_id, principal)
    return MyVoteResponse(voted=direction is not None, direction=direction)


@router.get("/posts/{post_id}/comments", response_model=list[CommentThreadResponse])
async def get_comments(post_id: int, db: SessionDep) -> list[CommentThreadResponse]:
    """Get the comment tree of a post."""
    return [
        CommentThreadResponse.from_node(node)
        for node in content.get_threaded_comments(db, post_id)
    ]


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Comment:
    return content.create_comment(
        db, post_id, principal, comment_data.content, parent_id=comment_data.parent_id
    )
