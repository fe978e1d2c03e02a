from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.access import require_role
from app.auth.security import Principal, verify_token
from app.models.enums import UserRole


http_bearer = HTTPBearer(auto_error=False)


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> Principal | None:
    if credentials is None or not credentials.credentials:
        return None
    return verify_token(credentials.credentials)


def require_roles(*roles: UserRole):
    async def _inner(principal: Principal | None = Depends(get_principal)) -> Principal:
        return require_role(principal, *roles)

    return _inner


require_admin = require_roles(UserRole.admin)
require_staff = require_roles(UserRole.admin, UserRole.employee)
