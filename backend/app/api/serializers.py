from __future__ import annotations

from app.models.board import Board
from app.models.board_list import BoardList
from app.models.card import Card
from app.models.card_task import CardTask
from app.models.comment import Comment
from app.models.tag import Tag
from app.models.user import User
from app.schemas.board import BoardOut
from app.schemas.board_list import ListOut
from app.schemas.card import CardOut
from app.schemas.card_item import CommentOut, TagOut, TaskOut
from app.schemas.member import MemberOut
from app.services.uploads import public_url


def member_to_out(user: User) -> MemberOut:
    return MemberOut(id=user.id, name=user.name)


def board_to_out(board: Board, members: list[User]) -> BoardOut:
    return BoardOut(
        fkboardid=board.external_id,
        title=board.title,
        description=board.description or "",
        members=[member_to_out(m) for m in members],
        status=board.status,
        progress=board.progress,
        createdAt=board.created_at,
        addedby=board.created_by_name,
        addedbyid=board.created_by_id,
        fkpoid=board.project_id,
    )


def list_to_out(board_list: BoardList, board_external_id: str) -> ListOut:
    return ListOut(
        id=board_list.id,
        fkboardid=board_external_id,
        name=board_list.name,
        position=board_list.position,
    )


def task_to_out(task: CardTask) -> TaskOut:
    return TaskOut(
        id=task.id,
        cardId=task.card_id,
        name=task.name,
        status=task.status,
        assigneeId=task.assignee_id,
    )


def tag_to_out(tag: Tag) -> TagOut:
    return TagOut(id=tag.id, cardId=tag.card_id, title=tag.title, color=tag.color)


def comment_to_out(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        cardId=comment.card_id,
        author=comment.author,
        message=comment.message,
        createdAt=comment.created_at,
    )


def card_to_out(
    card: Card,
    base_url: str,
    tasks: list[CardTask] | None = None,
    tags: list[Tag] | None = None,
    comments: list[Comment] | None = None,
) -> CardOut:
    return CardOut(
        id=card.id,
        listId=card.list_id,
        title=card.title,
        description=card.description or "",
        position=card.position,
        imageUrl=public_url(card.image_path, base_url),
        startDate=card.start_date,
        endDate=card.end_date,
        tasks=[task_to_out(t) for t in tasks or []],
        tags=[tag_to_out(t) for t in tags or []],
        comments=[comment_to_out(c) for c in comments or []],
    )
