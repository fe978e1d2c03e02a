from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_principal
from app.auth.security import Principal, create_user_token, verify_password
from app.db import get_db
from app.errors import UnauthorizedError
from app.models.user import User
from app.schemas.auth import LoginRequest, PrincipalOut, TokenResponse


router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
    user = (await db.execute(select(User).where(User.email == payload.email))).scalar_one_or_none()
    if user is None or not user.password_hash or not verify_password(payload.password, user.password_hash):
        raise UnauthorizedError("Invalid credentials")
    return TokenResponse(access_token=create_user_token(user_id=user.id, name=user.name, role=user.role))


@router.get("/me", response_model=PrincipalOut)
async def me(principal: Principal | None = Depends(get_principal)) -> PrincipalOut:
    if principal is None:
        raise UnauthorizedError()
    return PrincipalOut(
        kind=principal.kind,
        id=principal.user_id,
        name=principal.name,
        role=principal.role,
        fkboardid=principal.board_external_id,
    )
