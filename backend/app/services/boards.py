from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.models.board import Board
from app.models.board_list import BoardList
from app.models.board_member import BoardMember
from app.models.enums import BoardStatus, ProjectStatus
from app.models.project import Project
from app.models.user import User
from app.services.cascade import delete_subtree


DEFAULT_LISTS = ("To-do", "In-progress", "Done")


async def get_board(db: AsyncSession, board_id: int) -> Board:
    board = (await db.execute(select(Board).where(Board.id == board_id))).scalar_one_or_none()
    if board is None:
        raise NotFoundError("Board not found")
    return board


async def get_board_by_external_id(db: AsyncSession, external_id: str) -> Board:
    board = (await db.execute(select(Board).where(Board.external_id == external_id))).scalar_one_or_none()
    if board is None:
        raise NotFoundError("Board not found")
    return board


async def list_projects(db: AsyncSession) -> list[Project]:
    return list((await db.execute(select(Project).order_by(Project.id))).scalars().all())


async def list_project_boards(db: AsyncSession, project_id: int) -> list[Board]:
    stmt = select(Board).where(Board.project_id == project_id).order_by(Board.created_at.desc(), Board.id.desc())
    return list((await db.execute(stmt)).scalars().all())


async def list_users(db: AsyncSession) -> list[User]:
    return list((await db.execute(select(User).order_by(User.id))).scalars().all())


async def members_by_board(db: AsyncSession, board_ids: Sequence[int]) -> dict[int, list[User]]:
    result: dict[int, list[User]] = {board_id: [] for board_id in board_ids}
    if not board_ids:
        return result
    stmt = (
        select(BoardMember.board_id, User)
        .join(User, User.id == BoardMember.user_id)
        .where(BoardMember.board_id.in_(board_ids))
        .order_by(User.id)
    )
    for board_id, user in (await db.execute(stmt)).all():
        result[board_id].append(user)
    return result


async def upsert_project(db: AsyncSession, project_id: int, name: str) -> Project:
    project = (await db.execute(select(Project).where(Project.id == project_id))).scalar_one_or_none()
    if project is None:
        project = Project(id=project_id, name=name, status=ProjectStatus.open)
        db.add(project)
        await db.flush()
    return project


def _unique_ids(user_ids: Iterable[int]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for user_id in user_ids:
        if user_id not in seen:
            seen.add(user_id)
            ordered.append(user_id)
    return ordered


async def _existing_user_ids(db: AsyncSession, user_ids: list[int]) -> list[int]:
    if not user_ids:
        return []
    found = set((await db.execute(select(User.id).where(User.id.in_(user_ids)))).scalars().all())
    missing = [user_id for user_id in user_ids if user_id not in found]
    if missing:
        raise NotFoundError(f"User not found: {', '.join(str(m) for m in missing)}")
    return user_ids


async def add_members(db: AsyncSession, board: Board, user_ids: Iterable[int]) -> None:
    wanted = await _existing_user_ids(db, _unique_ids(user_ids))
    if not wanted:
        return
    current = set(
        (await db.execute(select(BoardMember.user_id).where(BoardMember.board_id == board.id))).scalars().all()
    )
    for user_id in wanted:
        if user_id not in current:
            db.add(BoardMember(board_id=board.id, user_id=user_id))
    await db.flush()


async def replace_members(db: AsyncSession, board: Board, user_ids: Iterable[int]) -> None:
    wanted = await _existing_user_ids(db, _unique_ids(user_ids))
    await db.execute(delete(BoardMember).where(BoardMember.board_id == board.id))
    for user_id in wanted:
        db.add(BoardMember(board_id=board.id, user_id=user_id))
    await db.flush()


async def create_board(
    db: AsyncSession,
    *,
    project_id: int,
    project_name: str,
    title: str | None = None,
    description: str | None = None,
    created_by_id: int = 0,
    created_by_name: str = "System",
    member_ids: Iterable[int] = (),
) -> Board:
    await upsert_project(db, project_id, project_name)

    board = Board(
        project_id=project_id,
        title=title or project_name,
        description=description or "",
        status=BoardStatus.open,
        progress=0,
        created_by_id=created_by_id,
        created_by_name=created_by_name,
    )
    db.add(board)
    await db.flush()

    for position, name in enumerate(DEFAULT_LISTS):
        db.add(BoardList(board_id=board.id, name=name, position=position))
    await db.flush()

    await add_members(db, board, member_ids)
    return board


async def update_board(
    db: AsyncSession,
    board: Board,
    *,
    title: str | None = None,
    description: str | None = None,
    progress: int | None = None,
    member_ids: Sequence[int] | None = None,
) -> Board:
    if title is not None:
        board.title = title
    if description is not None:
        board.description = description
    if progress is not None:
        if not 0 <= progress <= 100:
            raise ValidationError("progress must be between 0 and 100")
        if board.status == BoardStatus.closed and progress != 100:
            raise ValidationError("closed boards stay at 100% progress")
        board.progress = progress
    await db.flush()

    if member_ids is not None:
        await replace_members(db, board, member_ids)
    return board


async def delete_board(db: AsyncSession, board: Board) -> list[str]:
    return await delete_subtree(db, Board, [board.id])
