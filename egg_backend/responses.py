"""JSON helpers shared by the public and admin API views."""

import json
from functools import wraps
from typing import Any, Dict, Optional

from django.http import JsonResponse


class BadRequestError(Exception):
    """Raised when a request body cannot be interpreted."""


def json_error(
    message: str,
    status: int = 400,
    code: Optional[str] = None,
) -> JsonResponse:
    payload: Dict[str, Any] = {"success": False, "message": message}
    if code:
        payload["code"] = code
    return JsonResponse(payload, status=status, json_dumps_params={"ensure_ascii": False})


def parse_body(request) -> Dict[str, Any]:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BadRequestError(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise BadRequestError("Request body must be a JSON object.")
    return payload


def staff_required(view):
    """Answer 403 JSON instead of redirecting when the caller is not staff."""

    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated or not user.is_staff:
            return json_error("Admin login required.", status=403, code="forbidden")
        return view(request, *args, **kwargs)

    return _wrapped
