from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.api.serializers import card_to_out, comment_to_out, tag_to_out, task_to_out
from app.auth.security import Principal
from app.db import get_db, unit_of_work
from app.errors import ValidationError
from app.schemas.card import CardDeleted, CardMove, CardOut
from app.schemas.card_item import CommentCreate, CommentOut, TagCreate, TagOut, TaskCreate, TaskOut
from app.services import card_items
from app.services import cards as card_service
from app.services.uploads import delete_image, store_image


router = APIRouter()


def _parse_form_date(value: str, field: str) -> datetime | None:
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"{field}: invalid date") from exc


async def _card_out(db: AsyncSession, card, base_url: str) -> CardOut:
    tasks, tags, comments = await card_items.children_for_cards(db, [card.id])
    return card_to_out(
        card,
        base_url,
        tasks=tasks.get(card.id),
        tags=tags.get(card.id),
        comments=comments.get(card.id),
    )


@router.patch("/move", response_model=CardOut)
async def move_card(
    payload: CardMove,
    request: Request,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> CardOut:
    async with unit_of_work(db):
        card = await card_service.get_card(db, payload.cardId)
        await card_service.move_card(db, card, dest_list_id=payload.toListId, dest_index=payload.toIndex)
        out = await _card_out(db, card, str(request.base_url))
    return out


@router.put("/{card_id}", response_model=CardOut)
async def update_card(
    card_id: int,
    request: Request,
    title: str | None = Form(None),
    description: str | None = Form(None),
    startDate: str | None = Form(None),
    endDate: str | None = Form(None),
    removeImage: bool = Form(False),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> CardOut:
    changes: dict = {}
    if title is not None:
        if not title.strip():
            raise ValidationError("title must not be empty")
        changes["title"] = title.strip()
    if description is not None:
        changes["description"] = description
    if startDate is not None:
        changes["start_date"] = _parse_form_date(startDate, "startDate")
    if endDate is not None:
        changes["end_date"] = _parse_form_date(endDate, "endDate")

    new_image = None
    if image is not None and image.filename:
        new_image = await store_image(image)
        changes["image_path"] = new_image
    elif removeImage:
        changes["image_path"] = None

    try:
        async with unit_of_work(db):
            card = await card_service.get_card(db, card_id)
            superseded = await card_service.update_card(db, card, changes)
            out = await _card_out(db, card, str(request.base_url))
    except Exception:
        delete_image(new_image)
        raise

    delete_image(superseded)
    return out


@router.delete("/{card_id}", response_model=CardDeleted)
async def delete_card(card_id: int, db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> CardDeleted:
    async with unit_of_work(db):
        card = await card_service.get_card(db, card_id)
        image_paths = await card_service.delete_card(db, card)
    for image_path in image_paths:
        delete_image(image_path)
    return CardDeleted(deleted=card_id)


@router.post("/{card_id}/tasks", response_model=TaskOut, status_code=201)
async def add_task(
    card_id: int,
    payload: TaskCreate,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> TaskOut:
    async with unit_of_work(db):
        card = await card_service.get_card(db, card_id)
        task = await card_items.create_task(
            db, card, name=payload.name, status=payload.status, assignee_id=payload.assigneeId
        )
    return task_to_out(task)


@router.post("/{card_id}/tags", response_model=TagOut, status_code=201)
async def add_tag(
    card_id: int,
    payload: TagCreate,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> TagOut:
    async with unit_of_work(db):
        card = await card_service.get_card(db, card_id)
        tag = await card_items.create_tag(db, card, title=payload.title, color=payload.color)
    return tag_to_out(tag)


@router.post("/{card_id}/comments", response_model=CommentOut, status_code=201)
async def add_comment(
    card_id: int,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
) -> CommentOut:
    async with unit_of_work(db):
        card = await card_service.get_card(db, card_id)
        comment = await card_items.create_comment(
            db, card, message=payload.message, author=payload.author or principal.name
        )
    return comment_to_out(comment)
