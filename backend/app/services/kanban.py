from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.board import Board
from app.models.board_list import BoardList
from app.models.card import Card
from app.models.card_task import CardTask
from app.models.comment import Comment
from app.models.tag import Tag
from app.models.user import User
from app.services.boards import members_by_board
from app.services.card_items import children_for_cards
from app.services.lists import lists_for_board
from app.services.progress import refresh_progress


@dataclass
class KanbanTree:
    board: Board
    progress: int
    members: list[User]
    lists: list[BoardList]
    cards_by_list: dict[int, list[Card]] = field(default_factory=dict)
    tasks_by_card: dict[int, list[CardTask]] = field(default_factory=dict)
    tags_by_card: dict[int, list[Tag]] = field(default_factory=dict)
    comments_by_card: dict[int, list[Comment]] = field(default_factory=dict)


async def load_kanban(db: AsyncSession, board: Board) -> KanbanTree:
    """Read the whole board tree from the store, recomputing progress."""
    progress = await refresh_progress(db, board)
    members = (await members_by_board(db, [board.id]))[board.id]
    lists = await lists_for_board(db, board.id)
    tree = KanbanTree(board=board, progress=progress, members=members, lists=lists)

    list_ids = [board_list.id for board_list in lists]
    if not list_ids:
        return tree

    cards = (
        await db.execute(select(Card).where(Card.list_id.in_(list_ids)).order_by(Card.position, Card.id))
    ).scalars().all()
    cards_by_list: dict[int, list[Card]] = defaultdict(list)
    for card in cards:
        cards_by_list[card.list_id].append(card)
    tree.cards_by_list = dict(cards_by_list)

    tree.tasks_by_card, tree.tags_by_card, tree.comments_by_card = await children_for_cards(
        db, [card.id for card in cards]
    )
    return tree
