from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.card_item import CommentOut, TagOut, TaskOut


class CardOut(BaseModel):
    id: int
    listId: int
    title: str
    description: str = ""
    position: int
    imageUrl: str | None = None
    startDate: datetime | None = None
    endDate: datetime | None = None
    tasks: list[TaskOut] = Field(default_factory=list)
    tags: list[TagOut] = Field(default_factory=list)
    comments: list[CommentOut] = Field(default_factory=list)


class CardCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=8000)
    startDate: datetime | None = None
    endDate: datetime | None = None


class CardMove(BaseModel):
    cardId: int
    toListId: int
    toIndex: int | None = Field(default=None, ge=0)


class CardDeleted(BaseModel):
    deleted: int
