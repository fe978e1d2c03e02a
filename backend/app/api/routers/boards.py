from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.access import ensure_board_read_access
from app.api.deps import get_principal, require_admin, require_staff
from app.api.serializers import board_to_out, card_to_out, list_to_out
from app.auth.security import Principal, create_viewer_token
from app.config import settings
from app.db import get_db, unit_of_work
from app.schemas.board import BoardCreate, BoardDeleted, BoardOut, BoardUpdate, ShareOut
from app.schemas.board_list import ListCreate, ListOut
from app.schemas.kanban import KanbanListOut, KanbanOut
from app.services import boards as board_service
from app.services.kanban import load_kanban
from app.services.lists import create_list
from app.services.progress import close_board
from app.services.uploads import delete_image


logger = logging.getLogger(__name__)

router = APIRouter()


async def _board_out(db: AsyncSession, board) -> BoardOut:
    members = await board_service.members_by_board(db, [board.id])
    return board_to_out(board, members[board.id])


@router.post("", response_model=BoardOut, status_code=201)
async def create_board(
    payload: BoardCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin),
) -> BoardOut:
    async with unit_of_work(db):
        board = await board_service.create_board(
            db,
            project_id=payload.fkpoid,
            project_name=payload.projectName,
            title=payload.title,
            description=payload.description,
            created_by_id=payload.addedbyid if payload.addedbyid is not None else principal.user_id,
            created_by_name=payload.addedby or principal.name or "System",
            member_ids=payload.memberIds,
        )
        out = await _board_out(db, board)
    logger.info("Board %s created for project %s", board.external_id, board.project_id)
    return out


@router.patch("/{board_id}", response_model=BoardOut)
async def update_board(
    board_id: str,
    payload: BoardUpdate,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_admin),
) -> BoardOut:
    async with unit_of_work(db):
        board = await board_service.get_board_by_external_id(db, board_id)
        await board_service.update_board(
            db,
            board,
            title=payload.title,
            description=payload.description,
            progress=payload.progress,
            member_ids=payload.memberIds,
        )
        out = await _board_out(db, board)
    return out


@router.delete("/{board_id}", response_model=BoardDeleted)
async def delete_board(board_id: str, db: AsyncSession = Depends(get_db), _=Depends(require_admin)) -> BoardDeleted:
    async with unit_of_work(db):
        board = await board_service.get_board_by_external_id(db, board_id)
        image_paths = await board_service.delete_board(db, board)
    for image_path in image_paths:
        delete_image(image_path)
    logger.info("Board %s deleted", board_id)
    return BoardDeleted(deleted=board_id)


@router.get("/{external_id}/kanban", response_model=KanbanOut)
async def get_kanban(
    external_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
) -> KanbanOut:
    ensure_board_read_access(principal, external_id)
    async with unit_of_work(db):
        board = await board_service.get_board_by_external_id(db, external_id)
        tree = await load_kanban(db, board)

    base_url = str(request.base_url)
    lists = []
    for board_list in tree.lists:
        cards = [
            card_to_out(
                card,
                base_url,
                tasks=tree.tasks_by_card.get(card.id),
                tags=tree.tags_by_card.get(card.id),
                comments=tree.comments_by_card.get(card.id),
            )
            for card in tree.cards_by_list.get(board_list.id, [])
        ]
        lists.append(KanbanListOut(id=board_list.id, name=board_list.name, position=board_list.position, cards=cards))
    return KanbanOut(board=board_to_out(board, tree.members), progress=tree.progress, lists=lists)


@router.post("/{external_id}/lists", response_model=ListOut, status_code=201)
async def add_list(
    external_id: str,
    payload: ListCreate,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> ListOut:
    async with unit_of_work(db):
        board = await board_service.get_board_by_external_id(db, external_id)
        board_list = await create_list(db, board, payload.name)
    return list_to_out(board_list, board.external_id)


@router.get("/{external_id}/share", response_model=ShareOut)
async def share_board(external_id: str, db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> ShareOut:
    board = await board_service.get_board_by_external_id(db, external_id)
    token = create_viewer_token(board_external_id=board.external_id)
    url = f"{settings.FRONTEND_URL.rstrip('/')}/boards/{quote(board.external_id)}?token={quote(token)}"
    return ShareOut(fkboardid=board.external_id, token=token, url=url)


@router.patch("/{external_id}/close", response_model=BoardOut)
async def mark_board_closed(external_id: str, db: AsyncSession = Depends(get_db), _=Depends(require_admin)) -> BoardOut:
    async with unit_of_work(db):
        board = await board_service.get_board_by_external_id(db, external_id)
        await close_board(db, board)
        out = await _board_out(db, board)
    logger.info("Board %s closed", external_id)
    return out
