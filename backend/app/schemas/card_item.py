from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.enums import TaskStatus


class TaskOut(BaseModel):
    id: int
    cardId: int
    name: str
    status: TaskStatus
    assigneeId: int | None = None


class TaskCreate(BaseModel):
    name: str = Field(min_length=1, max_length=300)
    status: TaskStatus = TaskStatus.todo
    assigneeId: int | None = None


class TaskUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=300)
    status: TaskStatus | None = None
    assigneeId: int | None = None


class TagOut(BaseModel):
    id: int
    cardId: int
    title: str
    color: str | None = None


class TagCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=32)


class CommentOut(BaseModel):
    id: int
    cardId: int
    author: str
    message: str
    createdAt: datetime


class CommentCreate(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    author: str | None = Field(default=None, max_length=100)


class ItemDeleted(BaseModel):
    deleted: int
