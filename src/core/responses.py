"""API Gateway proxy responses with the `{statusCode, data, message, success}` envelope."""

import json
import logging
from typing import Any

from pydantic import BaseModel

from core.errors import CityAtlasError, ErrorCode, ValidationError

logger = logging.getLogger(__name__)


def _to_plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_to_plain(item) for item in data]
    return data


def _envelope(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def api_response(status_code: int, data: Any, message: str = "Success") -> dict[str, Any]:
    return _envelope(
        status_code,
        {"statusCode": status_code, "data": _to_plain(data), "message": message, "success": status_code < 400},
    )


def error_response(error: CityAtlasError) -> dict[str, Any]:
    """Render a core error; the client only ever sees the user message for its code.

    Call from inside the handler's ``except`` block so server faults log their traceback.
    """
    if error.status_code >= 500:
        logger.exception("%s: %s", error.code.value, error.message)
    else:
        logger.info("Rejected request (%s): %s", error.code.value, error.message)

    return _envelope(
        error.status_code,
        {
            "statusCode": error.status_code,
            "data": None,
            "message": error.user_message,
            "success": False,
            "code": error.code.value,
        },
    )


def parse_body(event: dict[str, Any]) -> dict[str, Any]:
    raw = event.get("body") or "{}"
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Body is not valid JSON: {e}", code=ErrorCode.INVALID_REQUEST) from e
    if not isinstance(body, dict):
        raise ValidationError("Body must be a JSON object", code=ErrorCode.INVALID_REQUEST)
    return body
