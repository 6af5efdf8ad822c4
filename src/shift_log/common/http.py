from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..access.auth import AuthVerifier, CallerIdentity
from ..core.exceptions import DomainError, InvalidInputError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "not_authenticated": 401,
    "access_denied": 403,
    "not_found": 404,
    "already_active": 409,
    "no_active_shift": 409,
    "out_of_range": 422,
    "invalid_input": 400,
    "transient_store": 503,
}


def caller_identity(verifier: AuthVerifier) -> Optional[CallerIdentity]:
    return verifier.verify(request.headers.get("Authorization"))


def json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return payload


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def point_json(point) -> Optional[dict]:
    if point is None:
        return None
    return {"latitude": point.latitude, "longitude": point.longitude}


def shift_json(r) -> dict:
    return {
        "id": r.shift_id,
        "worker_id": r.worker_id,
        "clock_in_at": iso(r.clock_in_at),
        "clock_out_at": iso(r.clock_out_at),
        "clock_in_note": r.clock_in_note,
        "clock_out_note": r.clock_out_note,
        "clock_in_location": point_json(r.clock_in_location),
        "clock_out_location": point_json(r.clock_out_location),
        "duration_minutes": r.duration_minutes,
        "status": r.status.value,
    }


def worker_json(w) -> dict:
    return {
        "id": w.worker_id,
        "external_id": w.external_id,
        "email": w.email,
        "name": w.name,
        "role": w.role.value,
        "created_at": iso(w.created_at),
    }


def facility_json(loc) -> dict:
    return {
        "name": loc.name,
        "latitude": loc.latitude,
        "longitude": loc.longitude,
        "radius": loc.radius_meters,
        "updated_at": iso(loc.updated_at),
    }


def page_json(page, item_json: Callable[[Any], dict], *, key: str = "shifts") -> dict:
    return {
        key: [item_json(item) for item in page.items],
        "pagination": {
            "page": page.page,
            "limit": page.page_size,
            "total": page.total,
            "pages": page.pages,
        },
    }


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = STATUS_BY_KIND.get(e.kind, 400)
        if status >= 500:
            logger.error("%s: %s", e.kind, e.message)
        return jsonify(e.to_dict()), status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        kind = (e.name or "error").lower().replace(" ", "_")
        return jsonify({"error": kind, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            message = f"Internal server error: {e}"
        else:
            message = "Internal server error"
        return jsonify({"error": "internal", "message": message}), 500
