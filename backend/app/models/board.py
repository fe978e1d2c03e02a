from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base, utcnow
from app.models.enums import BoardStatus


def new_external_id() -> str:
    return uuid.uuid4().hex


class Board(Base):
    __tablename__ = "boards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False, default=new_external_id
    )
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[BoardStatus] = mapped_column(
        Enum(BoardStatus, name="board_status"), nullable=False, default=BoardStatus.open
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by_name: Mapped[str] = mapped_column(String(100), nullable=False, default="System")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
