"""Shared request validation helpers for ledger routers."""

from __future__ import annotations

import json
import math
from typing import Any

from microtask_ledger_service.core.exceptions import ServiceError
from microtask_ledger_service.services.models import MAX_AMOUNT


def _out_of_range(field_name: str) -> ServiceError:
    return ServiceError(
        "INVALID_AMOUNT",
        f"Field '{field_name}' must not exceed {MAX_AMOUNT} in magnitude",
        400,
        {"field": field_name, "max": MAX_AMOUNT},
    )


def parse_json_body(raw_body: bytes) -> dict[str, Any]:
    """Parse JSON body, raising ServiceError on failure."""
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ServiceError(
            "INVALID_JSON",
            "Request body is not valid JSON",
            400,
            {},
        ) from exc

    if not isinstance(data, dict):
        raise ServiceError(
            "INVALID_JSON",
            "Request body must be a JSON object",
            400,
            {},
        )

    return data


def require_str(data: dict[str, Any], field_name: str) -> str:
    """Extract a required non-empty string field."""
    value = data.get(field_name)
    if value is None:
        raise ServiceError(
            "INVALID_PAYLOAD",
            f"Missing required field: {field_name}",
            400,
            {"field": field_name},
        )
    if not isinstance(value, str) or not value:
        raise ServiceError(
            "INVALID_PAYLOAD",
            f"Field '{field_name}' must be a non-empty string",
            400,
            {"field": field_name},
        )
    return value


def optional_str(data: dict[str, Any], field_name: str) -> str | None:
    """Extract an optional string field."""
    value = data.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ServiceError(
            "INVALID_PAYLOAD",
            f"Field '{field_name}' must be a string",
            400,
            {"field": field_name},
        )
    return value


def require_int(data: dict[str, Any], field_name: str) -> int:
    """Extract a required integer field (bools are rejected)."""
    value = data.get(field_name)
    if value is None:
        raise ServiceError(
            "INVALID_PAYLOAD",
            f"Missing required field: {field_name}",
            400,
            {"field": field_name},
        )
    if not isinstance(value, int) or isinstance(value, bool):
        raise ServiceError(
            "INVALID_AMOUNT",
            f"Field '{field_name}' must be an integer",
            400,
            {"field": field_name},
        )
    if abs(value) > MAX_AMOUNT:
        raise _out_of_range(field_name)
    return value


def optional_int(data: dict[str, Any], field_name: str) -> int | None:
    """Extract an optional integer field."""
    if data.get(field_name) is None:
        return None
    return require_int(data, field_name)


def optional_number(data: dict[str, Any], field_name: str) -> float | None:
    """Extract an optional int or float field."""
    value = data.get(field_name)
    if value is None:
        return None
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ServiceError(
            "INVALID_PAYLOAD",
            f"Field '{field_name}' must be a number",
            400,
            {"field": field_name},
        )
    if not math.isfinite(value) or abs(value) > MAX_AMOUNT:
        raise _out_of_range(field_name)
    return value
