from __future__ import annotations

from functools import wraps

from flask import request

from ..common.http import json_body, str_value
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import User
from .service import AuthService


def _authenticated_user(auth: AuthService) -> User:
    """Credentials from HTTP Basic, else JSON `email`/`password`."""
    basic = request.authorization
    if basic and basic.username:
        email, password = basic.username, basic.password
    else:
        body = json_body()
        email = str_value(body.get("email"), "email")
        password = str_value(body.get("password"), "password")

    if not email or not password:
        raise AuthenticationError("Credentials are required")
    return auth.authenticate(email, password)


def employee_required(auth: AuthService):
    """Verify employee credentials and pass the user on."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _authenticated_user(auth)
            if user.is_admin:
                raise AuthorizationError("Only employees can perform this action")
            return view(user, *args, **kwargs)

        return wrapper

    return decorator


def admin_required(auth: AuthService):
    """Verify admin credentials; the `admin_id` URL segment must be the caller."""

    def decorator(view):
        @wraps(view)
        def wrapper(admin_id: int, *args, **kwargs):
            user = _authenticated_user(auth)
            admin = auth.require_admin(user.user_id)
            if admin.user_id != int(admin_id):
                raise AuthorizationError("Credentials do not match the admin in the URL")
            return view(admin, *args, **kwargs)

        return wrapper

    return decorator
