from app.models.board import Board
from app.models.board_list import BoardList
from app.models.board_member import BoardMember
from app.models.card import Card
from app.models.card_task import CardTask
from app.models.comment import Comment
from app.models.project import Project
from app.models.tag import Tag
from app.models.user import User

__all__ = [
    "Board",
    "BoardList",
    "BoardMember",
    "Card",
    "CardTask",
    "Comment",
    "Project",
    "Tag",
    "User",
]
