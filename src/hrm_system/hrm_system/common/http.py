"""Helpers shared by the Flask controllers (JSON in, JSON out)."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import (
    ConflictError,
    DomainError,
    NoActivePolicyError,
    NoActiveShiftError,
    NotFoundError,
    PayrollRunStateError,
    ValidationError,
)
from ..core.tenant import TenantContext
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def _status_for(exc: DomainError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (ConflictError, PayrollRunStateError)):
        return 409
    if isinstance(exc, (NoActiveShiftError, NoActivePolicyError)):
        return 422
    return 400


def current_tenant() -> TenantContext:
    company_id = request.headers.get("X-Company-Id", "").strip()
    user_id = request.headers.get("X-User-Id", "").strip()
    if not company_id.isdigit() or not user_id.isdigit():
        raise ValidationError("Missing tenant headers")
    return TenantContext(company_id=int(company_id), user_id=int(user_id))


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def optional_date_arg(name: str) -> Optional[date]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def require_date(payload: dict, name: str) -> date:
    raw = str(payload.get(name) or "").strip()
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def ok(data: Any = None, *, message: str = "", status: int = 200):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def json_endpoint(view):
    """Map domain errors to JSON error payloads; log anything unexpected."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), _status_for(e)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal server error"}), 500

    return wrapper
