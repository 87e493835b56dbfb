from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, password_hash, role, is_active, late_grace_period_count"


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r["is_active"]),
        late_grace_period_count=int(r["late_grace_period_count"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", ((email or "").strip().lower(),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_active_admins(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s AND is_active=1 ORDER BY user_id",
                (Role.ADMIN.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def set_grace_period_count(self, user_id: int, *, count: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET late_grace_period_count=%s WHERE user_id=%s",
                (int(count), int(user_id)),
            )
            return cur.rowcount > 0
