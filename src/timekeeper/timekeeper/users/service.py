from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LATE_GRACE_PERIOD_COUNT
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: verify credentials and roles before domain actions run."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> User:
        email = require_non_empty(email, "Email").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")
        return user

    def require_admin(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if user.role != Role.ADMIN or not user.is_active:
            raise AuthorizationError("Only an active admin can perform this action")
        return user

    def require_employee(self, employee_id: int) -> User:
        user = self._users.get_by_id(int(employee_id))
        if not user or user.role != Role.EMPLOYEE:
            raise NotFoundError("Employee not found")
        if not user.is_active:
            raise AuthorizationError("Employee account is inactive")
        return user

    def find_user(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(int(user_id))

    def admin_recipients(self) -> list[str]:
        return [u.email for u in self._users.list_active_admins()]


class EmployeeService:
    """Use case: admin maintenance of per-employee attendance settings."""

    def __init__(
        self,
        users: UserRepository,
        auth: AuthService,
        *,
        default_grace_periods: int = DEFAULT_LATE_GRACE_PERIOD_COUNT,
    ):
        self._users = users
        self._auth = auth
        self._default_grace_periods = int(default_grace_periods)

    def reset_grace_periods(
        self,
        *,
        admin_user_id: int,
        employee_id: int,
        count: Optional[int] = None,
    ) -> User:
        self._auth.require_admin(admin_user_id)
        employee = self._auth.require_employee(employee_id)
        count = self._default_grace_periods if count is None else int(count)
        if count < 0:
            raise ValidationError("Grace period count cannot be negative")

        self._users.set_grace_period_count(employee.user_id, count=count)
        logger.info("Grace periods for employee %s reset to %s by admin %s", employee_id, count, admin_user_id)
        return self._users.get_by_id(employee.user_id)
