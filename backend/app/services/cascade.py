from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.board import Board
from app.models.board_list import BoardList
from app.models.board_member import BoardMember
from app.models.card import Card
from app.models.card_task import CardTask
from app.models.comment import Comment
from app.models.tag import Tag


# parent model -> [(child model, foreign key column on the child)]
OWNS: dict[type, list[tuple[type, str]]] = {
    Board: [(BoardList, "board_id"), (BoardMember, "board_id")],
    BoardList: [(Card, "list_id")],
    Card: [(CardTask, "card_id"), (Tag, "card_id"), (Comment, "card_id")],
}


async def delete_subtree(db: AsyncSession, model: type, ids: Sequence[int]) -> list[str]:
    """Delete rows of ``model`` and everything they own, children first.

    Issues one bulk DELETE per ownership edge and never commits; the caller's
    transaction decides whether the whole subtree goes or none of it does.
    Returns the image paths of deleted cards so their blobs can be removed
    once the transaction has committed.
    """
    ids = list(ids)
    if not ids:
        return []

    image_paths: list[str] = []
    if model is Card:
        rows = await db.execute(select(Card.image_path).where(Card.id.in_(ids), Card.image_path.is_not(None)))
        image_paths.extend(rows.scalars().all())

    for child, fk_name in OWNS.get(model, []):
        fk = getattr(child, fk_name)
        if child in OWNS:
            child_ids = (await db.execute(select(child.id).where(fk.in_(ids)))).scalars().all()
            image_paths.extend(await delete_subtree(db, child, child_ids))
        else:
            await db.execute(delete(child).where(fk.in_(ids)))

    await db.execute(delete(model).where(model.id.in_(ids)))
    return image_paths
