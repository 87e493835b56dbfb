"""JSON plumbing shared by the feature controllers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..attendance.model import RequestMeta
from ..core.exceptions import DeliveryError, DomainError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)


def ok(status_code: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status_code


def error_response(kind: str, message: str, status_code: int):
    return jsonify({"success": False, "kind": kind, "message": message}), status_code


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def request_meta() -> RequestMeta:
    forwarded = request.headers.get("X-Forwarded-For", "")
    ip = forwarded.split(",")[0].strip() if forwarded else request.remote_addr
    return RequestMeta(ip_address=ip, user_agent=request.headers.get("User-Agent"))


def str_value(value: Any, field_name: str) -> Optional[str]:
    """Text field from a JSON body; absent stays None, any non-string is rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def date_value(value: Any, field_name: str, *, required: bool = True) -> Optional[date]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def datetime_value(value: Any, field_name: str, *, on_date: Optional[date] = None) -> datetime:
    """ISO datetime, or HH:MM combined with `on_date`."""
    if value in (None, ""):
        raise ValidationError(f"{field_name} is required")
    text = str(value)
    try:
        if on_date is not None and len(text) <= 5:
            return datetime.combine(on_date, datetime.strptime(text, "%H:%M").time())
        return parse_iso_datetime(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO datetime or HH:MM")


def int_value(value: Any, field_name: str, *, default: Optional[int] = None) -> int:
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        logger.info("%s %s -> %s: %s", request.method, request.path, e.kind, e)
        return error_response(e.kind, str(e), e.status_code)

    @app.errorhandler(DeliveryError)
    def handle_delivery_error(e: DeliveryError):
        logger.error("%s %s -> %s: %s", request.method, request.path, e.kind, e)
        return error_response(e.kind, str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.name.replace(" ", ""), e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("InternalError", "Internal server error", 500)
