from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_LATE_GRACE_PERIOD_COUNT
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account from the identity store.

    Note: plain data object (no DB access). Employees carry the per-employee
    grace-period counter consumed by late check-ins.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
    late_grace_period_count: int = DEFAULT_LATE_GRACE_PERIOD_COUNT

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
