from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.db import get_db, unit_of_work
from app.schemas.card_item import ItemDeleted
from app.services import card_items


router = APIRouter()


@router.delete("/{tag_id}", response_model=ItemDeleted)
async def delete_tag(tag_id: int, db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> ItemDeleted:
    async with unit_of_work(db):
        tag = await card_items.get_tag(db, tag_id)
        await card_items.delete_tag(db, tag)
    return ItemDeleted(deleted=tag_id)
