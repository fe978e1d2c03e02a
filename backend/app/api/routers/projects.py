from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.api.serializers import board_to_out
from app.db import get_db
from app.schemas.board import BoardOut
from app.schemas.project import ProjectOut
from app.services.boards import list_project_boards, list_projects, members_by_board


router = APIRouter()


@router.get("", response_model=list[ProjectOut])
async def get_projects(db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> list[ProjectOut]:
    return [ProjectOut(id=p.id, name=p.name) for p in await list_projects(db)]


@router.get("/{project_id}/boards", response_model=list[BoardOut])
async def get_project_boards(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> list[BoardOut]:
    # Unknown projects simply have no boards.
    boards = await list_project_boards(db, project_id)
    members = await members_by_board(db, [b.id for b in boards])
    return [board_to_out(b, members[b.id]) for b in boards]
