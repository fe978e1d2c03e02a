from __future__ import annotations

from app.auth.security import Principal
from app.errors import ForbiddenError, UnauthorizedError
from app.models.enums import UserRole


def require_role(principal: Principal | None, *allowed: UserRole) -> Principal:
    if principal is None or not principal.is_user:
        raise UnauthorizedError("auth required")
    if principal.role not in allowed:
        raise ForbiddenError("forbidden")
    return principal


def ensure_board_read_access(principal: Principal | None, board_external_id: str) -> None:
    # Anonymous callers get public read; user tokens read every board.
    if principal is None or principal.is_user:
        return
    if principal.board_external_id != str(board_external_id):
        raise ForbiddenError("viewer token not for this board")
