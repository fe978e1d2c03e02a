from __future__ import annotations

from pydantic import BaseModel, EmailStr

from app.models.enums import TokenKind, UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PrincipalOut(BaseModel):
    kind: TokenKind
    id: int | None = None
    name: str | None = None
    role: UserRole | None = None
    fkboardid: str | None = None
