from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.models.enums import TokenKind, UserRole


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    kind: TokenKind
    user_id: int | None = None
    name: str | None = None
    role: UserRole | None = None
    board_external_id: str | None = None

    @property
    def is_user(self) -> bool:
        return self.kind == TokenKind.user

    @property
    def is_viewer(self) -> bool:
        return self.kind == TokenKind.viewer


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def _expiry(now: datetime, expires_delta: timedelta | None) -> datetime:
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_TOKEN_EXPIRE_DAYS)
    return now + expires_delta


def create_user_token(
    *,
    user_id: int,
    name: str | None,
    role: UserRole | str,
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    role_value = role.value if isinstance(role, UserRole) else str(role)
    payload = {
        "typ": TokenKind.user.value,
        "sub": str(int(user_id)),
        "name": str(name or "User"),
        "role": UserRole.admin.value if role_value == UserRole.admin.value else UserRole.employee.value,
        "iat": int(now.timestamp()),
        "exp": int(_expiry(now, expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def create_viewer_token(*, board_external_id: str, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "typ": TokenKind.viewer.value,
        "fkboardid": str(board_external_id),
        "iat": int(now.timestamp()),
        "exp": int(_expiry(now, expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc


def principal_from_claims(payload: dict) -> Principal:
    kind = TokenKind(payload.get("typ"))
    if kind == TokenKind.viewer:
        board_external_id = payload.get("fkboardid")
        if not isinstance(board_external_id, str) or not board_external_id:
            raise ValueError("Viewer token is not bound to a board")
        return Principal(kind=kind, board_external_id=board_external_id)

    return Principal(
        kind=kind,
        user_id=int(payload["sub"]),
        name=str(payload.get("name") or "User"),
        role=UserRole(payload.get("role")),
    )


def verify_token(token: str | None) -> Principal | None:
    """Decode a bearer token into a principal.

    Missing, expired, tampered or malformed tokens all come back as ``None`` so
    the caller carries on as anonymous.
    """
    if not token:
        return None
    try:
        return principal_from_claims(decode_token(token))
    except (ValueError, KeyError, TypeError):
        return None
