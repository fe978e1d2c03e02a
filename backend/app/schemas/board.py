from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.enums import BoardStatus
from app.schemas.member import MemberOut


class BoardOut(BaseModel):
    fkboardid: str
    title: str
    description: str = ""
    members: list[MemberOut] = Field(default_factory=list)
    status: BoardStatus
    progress: int
    createdAt: datetime
    addedby: str
    addedbyid: int
    fkpoid: int


class BoardCreate(BaseModel):
    projectName: str = Field(min_length=1, max_length=200)
    fkpoid: int = Field(gt=0)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=4000)
    addedbyid: int | None = None
    addedby: str | None = Field(default=None, max_length=100)
    memberIds: list[int] = Field(default_factory=list)


class BoardUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=4000)
    progress: int | None = Field(default=None, ge=0, le=100)
    memberIds: list[int] | None = None


class BoardDeleted(BaseModel):
    deleted: str


class ShareOut(BaseModel):
    fkboardid: str
    token: str
    url: str
