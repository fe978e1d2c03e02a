from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.models.board_list import BoardList
from app.models.card import Card
from app.services import positions
from app.services.cascade import delete_subtree
from app.services.lists import get_list


CARD_UPDATABLE_FIELDS = ("title", "description", "start_date", "end_date", "image_path")


async def get_card(db: AsyncSession, card_id: int) -> Card:
    card = (await db.execute(select(Card).where(Card.id == card_id))).scalar_one_or_none()
    if card is None:
        raise NotFoundError("Card not found")
    return card


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _check_dates(start_date: datetime | None, end_date: datetime | None) -> None:
    start_date, end_date = _as_utc(start_date), _as_utc(end_date)
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValidationError("endDate must not be before startDate")


async def create_card(
    db: AsyncSession,
    board_list: BoardList,
    *,
    title: str,
    description: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> Card:
    _check_dates(start_date, end_date)
    position = await positions.next_position(db, Card, Card.list_id, board_list.id)
    card = Card(
        list_id=board_list.id,
        title=title,
        description=description or "",
        position=position,
        start_date=start_date,
        end_date=end_date,
    )
    db.add(card)
    await db.flush()
    return card


async def update_card(db: AsyncSession, card: Card, changes: dict[str, Any]) -> str | None:
    """Apply only the fields present in ``changes``.

    Returns the superseded image path when the image was replaced, so the
    caller can drop the old blob after commit.
    """
    unknown = set(changes) - set(CARD_UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown card fields: {', '.join(sorted(unknown))}")

    _check_dates(changes.get("start_date", card.start_date), changes.get("end_date", card.end_date))

    superseded = None
    if "image_path" in changes and changes["image_path"] != card.image_path:
        superseded = card.image_path

    for field, value in changes.items():
        if field in ("title", "description") and value is None:
            continue
        setattr(card, field, value)
    await db.flush()
    return superseded


async def delete_card(db: AsyncSession, card: Card) -> list[str]:
    list_id = card.list_id
    image_paths = await delete_subtree(db, Card, [card.id])
    await positions.resequence(db, Card, Card.list_id, list_id)
    return image_paths


async def move_card(db: AsyncSession, card: Card, *, dest_list_id: int, dest_index: int | None = None) -> Card:
    if dest_index is not None and dest_index < 0:
        raise ValidationError("toIndex must be zero or greater")

    source = await get_list(db, card.list_id)
    dest = await get_list(db, dest_list_id)
    if dest.board_id != source.board_id:
        raise NotFoundError("List not found on this board")

    if dest.id == source.id:
        await positions.move_within(
            db, Card, Card.list_id, source.id, item_id=card.id, to_index=dest_index, label="Card"
        )
    else:
        await positions.move_across(db, Card, Card.list_id, card, dest_parent_id=dest.id, dest_index=dest_index)
    return card
