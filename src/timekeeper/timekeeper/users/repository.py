from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Identity store interface.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_active_admins(self) -> Sequence[User]:
        raise NotImplementedError

    def set_grace_period_count(self, user_id: int, *, count: int) -> bool:
        raise NotImplementedError
