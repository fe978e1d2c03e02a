from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from app.errors import NotFoundError


T = TypeVar("T")


def splice(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Move ``items[from_index]`` so it ends up at ``to_index``.

    Array splice semantics: remove at the source index, then insert at the
    destination index, shifting everything in between by one.
    """
    ordered = list(items)
    if not 0 <= from_index < len(ordered):
        raise IndexError(f"from_index {from_index} out of range for {len(ordered)} items")
    moved = ordered.pop(from_index)
    ordered.insert(max(0, min(to_index, len(ordered))), moved)
    return ordered


def dense_updates(items: Sequence[Any]) -> list[tuple[Any, int]]:
    return [(item, index) for index, item in enumerate(items) if item.position != index]


def apply_dense_positions(items: Sequence[Any]) -> int:
    updates = dense_updates(items)
    for item, position in updates:
        item.position = position
    return len(updates)


def index_of(items: Sequence[Any], item_id: int, label: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise NotFoundError(f"{label} {item_id} not found")


async def load_siblings(
    db: AsyncSession,
    model: type,
    parent_column: InstrumentedAttribute,
    parent_id: int,
) -> list[Any]:
    # Lock the sibling rows so concurrent reindexes of one parent serialize.
    stmt = (
        select(model)
        .where(parent_column == parent_id)
        .order_by(model.position, model.id)
        .with_for_update()
    )
    return list((await db.execute(stmt)).scalars().all())


async def next_position(
    db: AsyncSession,
    model: type,
    parent_column: InstrumentedAttribute,
    parent_id: int,
) -> int:
    stmt = select(func.count()).select_from(model).where(parent_column == parent_id)
    return int((await db.execute(stmt)).scalar_one())


async def resequence(
    db: AsyncSession,
    model: type,
    parent_column: InstrumentedAttribute,
    parent_id: int,
) -> list[Any]:
    siblings = await load_siblings(db, model, parent_column, parent_id)
    if apply_dense_positions(siblings):
        await db.flush()
    return siblings


async def reorder(
    db: AsyncSession,
    model: type,
    parent_column: InstrumentedAttribute,
    parent_id: int,
    *,
    from_id: int,
    to_id: int,
    label: str,
) -> list[Any]:
    siblings = await load_siblings(db, model, parent_column, parent_id)
    from_index = index_of(siblings, from_id, label)
    to_index = index_of(siblings, to_id, label)
    if from_index != to_index:
        siblings = splice(siblings, from_index, to_index)
    if apply_dense_positions(siblings):
        await db.flush()
    return siblings


async def move_within(
    db: AsyncSession,
    model: type,
    parent_column: InstrumentedAttribute,
    parent_id: int,
    *,
    item_id: int,
    to_index: int | None,
    label: str,
) -> list[Any]:
    siblings = await load_siblings(db, model, parent_column, parent_id)
    from_index = index_of(siblings, item_id, label)
    target = len(siblings) - 1 if to_index is None else to_index
    if from_index != target:
        siblings = splice(siblings, from_index, target)
    if apply_dense_positions(siblings):
        await db.flush()
    return siblings


async def move_across(
    db: AsyncSession,
    model: type,
    parent_column: InstrumentedAttribute,
    item: Any,
    *,
    dest_parent_id: int,
    dest_index: int | None,
) -> list[Any]:
    source_parent_id = getattr(item, parent_column.key)
    setattr(item, parent_column.key, dest_parent_id)
    await db.flush()

    await resequence(db, model, parent_column, source_parent_id)

    others = [s for s in await load_siblings(db, model, parent_column, dest_parent_id) if s.id != item.id]
    index = len(others) if dest_index is None else max(0, min(dest_index, len(others)))
    others.insert(index, item)
    if apply_dense_positions(others):
        await db.flush()
    return others
