from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.board import BoardOut
from app.schemas.card import CardOut


class KanbanListOut(BaseModel):
    id: int
    name: str
    position: int
    cards: list[CardOut] = Field(default_factory=list)


class KanbanOut(BaseModel):
    board: BoardOut
    progress: int
    lists: list[KanbanListOut] = Field(default_factory=list)
