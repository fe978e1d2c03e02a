from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.api.serializers import member_to_out
from app.db import get_db
from app.schemas.member import MemberOut
from app.services.boards import list_users


router = APIRouter()


@router.get("", response_model=list[MemberOut])
async def list_members(db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> list[MemberOut]:
    return [member_to_out(user) for user in await list_users(db)]
