from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import PreconditionFailedError
from app.models.board import Board
from app.models.board_list import BoardList
from app.models.card import Card
from app.models.enums import BoardStatus


DONE_LIST_NAME = "done"


def is_done_list(name: str | None) -> bool:
    return (name or "").strip().lower() == DONE_LIST_NAME


def compute_progress(lists: Iterable[tuple[str | None, int]]) -> int:
    """Percentage of the board's cards sitting in a list named "done".

    ``lists`` holds ``(list name, card count)`` pairs. The result is rounded
    half up, so 1 of 8 cards reports 13.
    """
    total = 0
    done = 0
    for name, card_count in lists:
        total += card_count
        if is_done_list(name):
            done += card_count
    if total == 0:
        return 0
    return (done * 200 + total) // (2 * total)


async def board_progress(db: AsyncSession, board: Board) -> int:
    stmt = (
        select(BoardList.name, func.count(Card.id))
        .select_from(BoardList)
        .outerjoin(Card, Card.list_id == BoardList.id)
        .where(BoardList.board_id == board.id)
        .group_by(BoardList.id, BoardList.name)
    )
    rows = (await db.execute(stmt)).all()
    return compute_progress((name, int(count)) for name, count in rows)


async def refresh_progress(db: AsyncSession, board: Board) -> int:
    if board.status == BoardStatus.closed:
        if board.progress != 100:
            board.progress = 100
            await db.flush()
        return 100

    progress = await board_progress(db, board)
    if board.progress != progress:
        board.progress = progress
        await db.flush()
    return progress


async def close_board(db: AsyncSession, board: Board) -> Board:
    if board.status == BoardStatus.closed:
        return board

    progress = await board_progress(db, board)
    if progress < 100:
        raise PreconditionFailedError(f"board is not fully done ({progress}%)", progress=progress)

    board.status = BoardStatus.closed
    board.progress = 100
    await db.flush()
    return board
