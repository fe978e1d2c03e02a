from __future__ import annotations

import asyncio
import os

from dotenv import load_dotenv
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import get_password_hash
from app.db import SessionLocal
from app.models.enums import UserRole
from app.models.user import User
from app.services.boards import upsert_project

load_dotenv()

DEFAULT_USERS = [
    (205, "Osama Ahmed", "osama@example.com", UserRole.admin, "admin123"),
    (301, "Abeer F.", "abeer@example.com", UserRole.employee, "employee123"),
    (302, "Badr N.", "badr@example.com", UserRole.employee, "employee234"),
    (303, "Carim K.", "carim@example.com", UserRole.employee, "employee345"),
]

DEFAULT_PROJECTS = [
    (1001, "ESAP ERP – Pilot"),
]


async def sync_user_id_sequence(db: AsyncSession) -> None:
    """Move the users.id sequence past the explicitly seeded ids (PostgreSQL only)."""
    if db.bind is None or db.bind.dialect.name != "postgresql":
        return
    await db.execute(
        text(
            "SELECT setval(pg_get_serial_sequence('users', 'id'), "
            "(SELECT GREATEST(MAX(id), 1) + 1 FROM users), false)"
        )
    )


async def seed() -> None:
    print("Starting seed process...")
    async with SessionLocal() as db:
        existing = set((await db.execute(select(User.id))).scalars().all())
        for user_id, name, email, role, password in DEFAULT_USERS:
            if user_id not in existing:
                db.add(
                    User(
                        id=user_id,
                        name=name,
                        email=email,
                        role=role,
                        password_hash=get_password_hash(password),
                    )
                )
        await db.flush()
        await sync_user_id_sequence(db)

        for project_id, name in DEFAULT_PROJECTS:
            await upsert_project(db, project_id, name)
        await db.commit()
        print("Users and projects seeded.")

        admin_email = os.getenv("ADMIN_EMAIL")
        admin_name = os.getenv("ADMIN_NAME")
        admin_password = os.getenv("ADMIN_PASSWORD")

        if admin_email and admin_name and admin_password:
            existing_admin = (await db.execute(select(User).where(User.email == admin_email))).scalar_one_or_none()
            if existing_admin is None:
                print(f"Creating admin user: {admin_email}")
                db.add(
                    User(
                        name=admin_name,
                        email=admin_email,
                        role=UserRole.admin,
                        password_hash=get_password_hash(admin_password),
                    )
                )
                await db.commit()
            else:
                print("Admin user already exists. Skipping creation.")


if __name__ == "__main__":
    asyncio.run(seed())
