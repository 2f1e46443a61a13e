# src/crew_deck/schemas/post.py
"""Post and comment Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from crew_deck.services.content import MAX_CONTENT_LENGTH, MAX_TITLE_LENGTH, CommentNode


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    post_type: str = Field(..., min_length=1, max_length=30, description="feedback, bug, ...")
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str | None = Field(None, min_length=1, max_length=MAX_CONTENT_LENGTH)


class PinRequest(BaseModel):
    pinned: bool = True


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    station_id: int
    author_principal: str
    post_type: str
    title: str
    content: str
    is_owner_post: bool
    is_pinned: bool
    is_edited: bool
    upvotes: int
    downvotes: int
    score: int
    comment_count: int
    created_at: datetime
    updated_at: datetime | None


class CommentCreate(BaseModel):
    """Schema for a comment; ``parent_id`` makes it a reply."""

    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)
    parent_id: int | None = None


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    station_id: int
    author_principal: str
    content: str
    parent_id: int | None
    depth: int
    upvotes: int
    downvotes: int
    score: int
    is_edited: bool
    created_at: datetime
    updated_at: datetime | None


class CommentThreadResponse(CommentResponse):
    """A comment with its nested replies."""

    replies: list[CommentThreadResponse] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: CommentNode) -> CommentThreadResponse:
        base = CommentResponse.model_validate(node.comment).model_dump()
        return cls(**base, replies=[cls.from_node(child) for child in node.replies])


class DeleteResponse(BaseModel):
    """Outcome of a cascading delete."""

    success: bool = True
    deleted: int
