from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.api.serializers import card_to_out, list_to_out
from app.db import get_db, unit_of_work
from app.schemas.board_list import ListDeleted, ListOut, ListReorder, ListUpdate
from app.schemas.card import CardCreate, CardOut
from app.services import lists as list_service
from app.services.boards import get_board, get_board_by_external_id
from app.services.cards import create_card
from app.services.uploads import delete_image


router = APIRouter()


@router.patch("/reorder", response_model=list[ListOut])
async def reorder_lists(
    payload: ListReorder,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> list[ListOut]:
    async with unit_of_work(db):
        board = await get_board_by_external_id(db, payload.boardId)
        lists = await list_service.reorder_lists(db, board, payload.fromListId, payload.toListId)
    return [list_to_out(board_list, board.external_id) for board_list in lists]


@router.patch("/{list_id}", response_model=ListOut)
async def rename_list(
    list_id: int,
    payload: ListUpdate,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> ListOut:
    async with unit_of_work(db):
        board_list = await list_service.get_list(db, list_id)
        await list_service.rename_list(db, board_list, payload.name)
        board = await get_board(db, board_list.board_id)
    return list_to_out(board_list, board.external_id)


@router.delete("/{list_id}", response_model=ListDeleted)
async def delete_list(list_id: int, db: AsyncSession = Depends(get_db), _=Depends(require_staff)) -> ListDeleted:
    async with unit_of_work(db):
        board_list = await list_service.get_list(db, list_id)
        image_paths = await list_service.delete_list(db, board_list)
    for image_path in image_paths:
        delete_image(image_path)
    return ListDeleted(deleted=list_id)


@router.post("/{list_id}/cards", response_model=CardOut, status_code=201)
async def add_card(
    list_id: int,
    payload: CardCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    _=Depends(require_staff),
) -> CardOut:
    async with unit_of_work(db):
        board_list = await list_service.get_list(db, list_id)
        card = await create_card(
            db,
            board_list,
            title=payload.title,
            description=payload.description,
            start_date=payload.startDate,
            end_date=payload.endDate,
        )
    return card_to_out(card, str(request.base_url))
