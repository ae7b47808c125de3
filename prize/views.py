from __future__ import annotations

import logging

from django.contrib.auth import authenticate, login, logout
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.db.models import Sum
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from egg_backend.responses import BadRequestError, json_error, parse_body, staff_required

from .locks import PrizeLockError, prize_draw_lock
from .models import DrawRecord, Prize
from .services import DrawConflictError, DrawResult, PrizeUnavailableError, draw_prize

logger = logging.getLogger(__name__)

RECORD_LIMIT = 100


def _json(payload, status: int = 200) -> JsonResponse:
    return JsonResponse(
        payload,
        status=status,
        safe=False,
        json_dumps_params={"ensure_ascii": False},
    )


@csrf_exempt
@require_http_methods(["POST"])
def draw(request):
    try:
        with prize_draw_lock():
            result: DrawResult = draw_prize()
    except PrizeLockError as exc:
        logger.warning("Draw rejected: %s", exc)
        return json_error(
            "Draw system is busy. Please try again later.", status=503, code="busy"
        )
    except PrizeUnavailableError as exc:
        return json_error("The prize pool is exhausted.", status=409, code=exc.code)
    except DrawConflictError as exc:
        return json_error(str(exc), status=503, code=exc.code)
    except (DatabaseError, ImproperlyConfigured):
        logger.exception("Draw failed before a prize could be awarded.")
        return json_error(
            "Draw failed. Please try again later.", status=503, code="storage_failure"
        )
    return _json({"success": True, "prize": result.prize.to_payload()})


@require_GET
def list_prizes(request):
    prizes = [prize.to_pool_payload() for prize in Prize.objects.all()]
    return _json(prizes)


@csrf_exempt
@require_http_methods(["POST"])
def admin_login(request):
    """Start a staff session.

    Login rotates the CSRF cookie; later admin writes must echo it in the
    X-CSRFToken header.
    """
    try:
        payload = parse_body(request)
    except BadRequestError as exc:
        return json_error(str(exc))

    username = payload.get("username") or "admin"
    password = payload.get("password")
    if not isinstance(username, str):
        return json_error("Username must be a string.")
    if not isinstance(password, str) or not password:
        return json_error("Password is required.")

    user = authenticate(request, username=username, password=password)
    if user is None or not user.is_staff:
        return json_error("Incorrect username or password.", status=403, code="forbidden")

    login(request, user)
    return _json({"success": True})


@require_http_methods(["POST"])
def admin_logout(request):
    logout(request)
    return _json({"success": True})


@require_GET
@staff_required
def list_records(request):
    records = list(DrawRecord.objects.all()[:RECORD_LIMIT])
    images = dict(
        Prize.objects.filter(id__in={record.prize_id for record in records})
        .values_list("id", "image")
    )
    payload = [
        {
            "id": record.id,
            "prize_id": record.prize_id,
            "prize_name": record.prize_name,
            "image": images.get(record.prize_id),
            "created_at": record.created_at.isoformat(),
        }
        for record in records
    ]
    return _json(payload)


@require_GET
@staff_required
def stats(request):
    prizes = list(Prize.objects.order_by("id"))
    total_stock = Prize.objects.aggregate(total=Sum("stock"))["total"] or 0
    return _json(
        {
            "totalDraws": DrawRecord.objects.count(),
            "totalStock": total_stock,
            "prizes": [
                {"id": prize.id, "name": prize.name, "stock": prize.stock}
                for prize in prizes
            ],
        }
    )
