from __future__ import annotations

from collections import defaultdict
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.models.card import Card
from app.models.card_task import CardTask
from app.models.comment import Comment
from app.models.enums import TaskStatus
from app.models.tag import Tag
from app.models.user import User


TASK_UPDATABLE_FIELDS = ("name", "status", "assignee_id")


async def _ensure_assignee(db: AsyncSession, assignee_id: int | None) -> None:
    if assignee_id is None:
        return
    found = (await db.execute(select(User.id).where(User.id == assignee_id))).scalar_one_or_none()
    if found is None:
        raise NotFoundError("Assignee not found")


async def get_task(db: AsyncSession, task_id: int) -> CardTask:
    task = (await db.execute(select(CardTask).where(CardTask.id == task_id))).scalar_one_or_none()
    if task is None:
        raise NotFoundError("Task not found")
    return task


async def create_task(
    db: AsyncSession,
    card: Card,
    *,
    name: str,
    status: TaskStatus = TaskStatus.todo,
    assignee_id: int | None = None,
) -> CardTask:
    await _ensure_assignee(db, assignee_id)
    task = CardTask(card_id=card.id, name=name, status=status, assignee_id=assignee_id)
    db.add(task)
    await db.flush()
    return task


async def update_task(db: AsyncSession, task: CardTask, changes: dict[str, Any]) -> CardTask:
    unknown = set(changes) - set(TASK_UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

    if "name" in changes:
        if not changes["name"]:
            raise ValidationError("name must not be empty")
        task.name = changes["name"]
    if "status" in changes:
        if changes["status"] is None:
            raise ValidationError("status must be todo or done")
        task.status = TaskStatus(changes["status"])
    if "assignee_id" in changes:
        await _ensure_assignee(db, changes["assignee_id"])
        task.assignee_id = changes["assignee_id"]
    await db.flush()
    return task


async def delete_task(db: AsyncSession, task: CardTask) -> None:
    await db.delete(task)
    await db.flush()


async def get_tag(db: AsyncSession, tag_id: int) -> Tag:
    tag = (await db.execute(select(Tag).where(Tag.id == tag_id))).scalar_one_or_none()
    if tag is None:
        raise NotFoundError("Tag not found")
    return tag


async def create_tag(db: AsyncSession, card: Card, *, title: str, color: str | None = None) -> Tag:
    tag = Tag(card_id=card.id, title=title, color=color)
    db.add(tag)
    await db.flush()
    return tag


async def delete_tag(db: AsyncSession, tag: Tag) -> None:
    await db.delete(tag)
    await db.flush()


async def create_comment(db: AsyncSession, card: Card, *, message: str, author: str | None = None) -> Comment:
    comment = Comment(card_id=card.id, author=(author or "").strip() or "Anonymous", message=message)
    db.add(comment)
    await db.flush()
    return comment


def _group_by_card(rows) -> dict[int, list]:
    grouped: dict[int, list] = defaultdict(list)
    for row in rows:
        grouped[row.card_id].append(row)
    return dict(grouped)


async def children_for_cards(
    db: AsyncSession, card_ids: list[int]
) -> tuple[dict[int, list[CardTask]], dict[int, list[Tag]], dict[int, list[Comment]]]:
    if not card_ids:
        return {}, {}, {}
    tasks = (await db.execute(select(CardTask).where(CardTask.card_id.in_(card_ids)).order_by(CardTask.id))).scalars()
    tags = (await db.execute(select(Tag).where(Tag.card_id.in_(card_ids)).order_by(Tag.id))).scalars()
    comments = (
        await db.execute(
            select(Comment).where(Comment.card_id.in_(card_ids)).order_by(Comment.created_at, Comment.id)
        )
    ).scalars()
    return _group_by_card(tasks.all()), _group_by_card(tags.all()), _group_by_card(comments.all())
