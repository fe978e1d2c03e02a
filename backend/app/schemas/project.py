from __future__ import annotations

from pydantic import BaseModel


class ProjectOut(BaseModel):
    id: int
    name: str
