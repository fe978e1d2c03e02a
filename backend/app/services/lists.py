from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError
from app.models.board import Board
from app.models.board_list import BoardList
from app.services import positions
from app.services.cascade import delete_subtree


async def get_list(db: AsyncSession, list_id: int) -> BoardList:
    board_list = (await db.execute(select(BoardList).where(BoardList.id == list_id))).scalar_one_or_none()
    if board_list is None:
        raise NotFoundError("List not found")
    return board_list


async def lists_for_board(db: AsyncSession, board_id: int) -> list[BoardList]:
    stmt = select(BoardList).where(BoardList.board_id == board_id).order_by(BoardList.position, BoardList.id)
    return list((await db.execute(stmt)).scalars().all())


async def create_list(db: AsyncSession, board: Board, name: str) -> BoardList:
    position = await positions.next_position(db, BoardList, BoardList.board_id, board.id)
    board_list = BoardList(board_id=board.id, name=name, position=position)
    db.add(board_list)
    await db.flush()
    return board_list


async def rename_list(db: AsyncSession, board_list: BoardList, name: str) -> BoardList:
    board_list.name = name
    await db.flush()
    return board_list


async def delete_list(db: AsyncSession, board_list: BoardList) -> list[str]:
    board_id = board_list.board_id
    image_paths = await delete_subtree(db, BoardList, [board_list.id])
    await positions.resequence(db, BoardList, BoardList.board_id, board_id)
    return image_paths


async def reorder_lists(db: AsyncSession, board: Board, from_list_id: int, to_list_id: int) -> list[BoardList]:
    return await positions.reorder(
        db,
        BoardList,
        BoardList.board_id,
        board.id,
        from_id=from_list_id,
        to_id=to_list_id,
        label="List",
    )
