from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.api.serializers import task_to_out
from app.db import get_db, unit_of_work
from app.schemas.card_item import ItemDeleted, TaskOut, TaskUpdate
from app.services import card_items


router = APIRouter()

_FIELD_NAMES = {"name": "name", "status": "status", "assigneeId": "assignee_id"}


@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> TaskOut:
    # Only fields sent by the client are applied; an explicit null clears the assignee.
    changes = {_FIELD_NAMES[key]: value for key, value in payload.model_dump(exclude_unset=True).items()}
    async with unit_of_work(db):
        task = await card_items.get_task(db, task_id)
        await card_items.update_task(db, task, changes)
    return task_to_out(task)


@router.delete("/{task_id}", response_model=ItemDeleted)
async def delete_task(task_id: int, db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> ItemDeleted:
    async with unit_of_work(db):
        task = await card_items.get_task(db, task_id)
        await card_items.delete_task(db, task)
    return ItemDeleted(deleted=task_id)
