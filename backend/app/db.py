from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.errors import ConflictError, StoreError


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block of store calls as one transaction.

    Commits when the block finishes; any exception rolls the whole block back so
    a half-applied cascade or reindex is never visible to other sessions.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Transaction rolled back on integrity error: %s", exc.orig)
        raise ConflictError() from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Transaction rolled back on database error")
        raise StoreError() from exc
    except BaseException:
        await db.rollback()
        raise


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
