from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    admin = "admin"
    employee = "employee"


class BoardStatus(str, enum.Enum):
    open = "open"
    closed = "closed"


class ProjectStatus(str, enum.Enum):
    open = "open"
    closed = "closed"


class TaskStatus(str, enum.Enum):
    todo = "todo"
    done = "done"


class TokenKind(str, enum.Enum):
    user = "user"
    viewer = "viewer"
