from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base
from app.models.enums import TaskStatus


class CardTask(Base):
    __tablename__ = "card_tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    card_id: Mapped[int] = mapped_column(Integer, ForeignKey("cards.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="card_task_status"), nullable=False, default=TaskStatus.todo
    )
    assignee_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"))
