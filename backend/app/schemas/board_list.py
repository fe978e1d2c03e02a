from __future__ import annotations

from pydantic import BaseModel, Field


class ListOut(BaseModel):
    id: int
    fkboardid: str
    name: str
    position: int


class ListCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class ListUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class ListReorder(BaseModel):
    boardId: str = Field(min_length=1)
    fromListId: int
    toListId: int


class ListDeleted(BaseModel):
    deleted: int
