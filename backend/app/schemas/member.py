from __future__ import annotations

from pydantic import BaseModel


class MemberOut(BaseModel):
    id: int
    name: str
