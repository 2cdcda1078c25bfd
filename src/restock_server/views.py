from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .api import get_server
from .decorators import require_api_key
from .exceptions import InvalidAmountError, NotFoundError, RestockError, WaiterLimitExceeded
from .state import is_int


_ERROR_STATUS: dict[type[RestockError], int] = {
    NotFoundError: 404,
    InvalidAmountError: 400,
    WaiterLimitExceeded: 503,
}


def _error(exc: RestockError) -> JsonResponse:
    status = next(
        (code for kind, code in _ERROR_STATUS.items() if isinstance(exc, kind)), 400
    )
    return JsonResponse({"ok": False, "code": exc.code, "detail": str(exc)}, status=status)


def _bad_request(detail: str) -> JsonResponse:
    return JsonResponse({"ok": False, "code": "bad_request", "detail": detail}, status=400)


def _json_body(request: HttpRequest) -> dict[str, Any] | None:
    """Parse a JSON object body, or None if it is not one."""
    try:
        body = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


@require_GET
def health(request: HttpRequest) -> HttpResponse:
    return HttpResponse("Server is healthy and running.")


@require_GET
@require_api_key
def stock(request: HttpRequest) -> HttpResponse:
    snapshot = get_server().get_snapshot()
    return JsonResponse(
        {
            "gearStock": snapshot.stock,
            "timeUntilRestock": snapshot.seconds_until_restock,
            "restockId": snapshot.epoch_id,
        }
    )


@csrf_exempt
@require_POST
@require_api_key
def force_restock(request: HttpRequest) -> HttpResponse:
    snapshot = get_server().force_restock()
    return JsonResponse(
        {
            "message": "Restock forced successfully.",
            "restockId": snapshot.epoch_id,
            "gearStock": snapshot.stock,
        }
    )


@csrf_exempt
@require_POST
@require_api_key
def set_timer(request: HttpRequest) -> HttpResponse:
    body = _json_body(request)
    if body is None or not is_int(body.get("newInterval")):
        return _bad_request("Invalid interval provided. It must be a positive number.")

    try:
        snapshot = get_server().set_restock_interval(body["newInterval"])
    except RestockError as exc:
        return _error(exc)

    return JsonResponse(
        {
            "message": f"Restock interval updated to {snapshot.restock_interval} seconds.",
            "timeUntilRestock": snapshot.seconds_until_restock,
        }
    )


@csrf_exempt
@require_POST
@require_api_key
def set_stock(request: HttpRequest) -> HttpResponse:
    body = _json_body(request)
    if body is None or not isinstance(body.get("item"), str) or not is_int(body.get("amount")):
        return _bad_request('Expected a JSON body like {"item": "<name>", "amount": <int>}.')

    try:
        snapshot = get_server().set_item_stock(body["item"], body["amount"])
    except RestockError as exc:
        return _error(exc)

    return JsonResponse(
        {
            "message": f"Stock of {body['item']} set to {body['amount']}.",
            "restockId": snapshot.epoch_id,
            "gearStock": snapshot.stock,
        }
    )


@require_GET
@require_api_key
async def listen_for_restock(request: HttpRequest) -> HttpResponse:
    """
    Long-poll: held open until the next restock.

    Answers immediately when `currentId` is already stale. Returns 204 when
    `MAX_WAIT_SECONDS` expires first so the client can simply ask again. A
    client disconnect cancels this coroutine, which removes the waiter.
    """
    known_epoch_id = request.GET.get("currentId")
    try:
        epoch_id = await get_server().wait_for_next_restock(known_epoch_id)
    except RestockError as exc:
        return _error(exc)

    if epoch_id is None:
        return HttpResponse(status=204)
    return JsonResponse({"restockId": epoch_id})
