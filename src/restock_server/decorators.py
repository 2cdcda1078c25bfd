from __future__ import annotations

import hmac
from functools import wraps
from typing import Any, Callable

from asgiref.sync import iscoroutinefunction, markcoroutinefunction
from django.http import HttpRequest, HttpResponse

from .conf import get_settings

API_KEY_HEADER = "X-API-Key"


def _unauthorized() -> HttpResponse:
    return HttpResponse("Unauthorized: Missing or incorrect API key.", status=401)


def _has_valid_key(request: HttpRequest) -> bool:
    """
    Compare the request's API key against the configured shared secret.

    Raises ImproperlyConfigured when no secret is configured, so a
    misconfigured deployment fails loudly instead of serving everyone.
    """
    expected = get_settings().require_api_key()
    supplied = request.headers.get(API_KEY_HEADER, "")
    return bool(supplied) and hmac.compare_digest(supplied.encode(), expected.encode())


def require_api_key(view: Callable[..., Any]):
    """
    Reject requests whose `X-API-Key` header does not match
    `RESTOCK_SERVER["API_KEY"]` with 401.

    Works for both sync and async views.

    Examples
    --------
    @require_api_key
    def stock(request):
        ...

    @require_api_key
    async def listen_for_restock(request):
        ...
    """
    if iscoroutinefunction(view):

        @wraps(view)
        async def async_wrapper(request: HttpRequest, *args: Any, **kwargs: Any):
            if not _has_valid_key(request):
                return _unauthorized()
            return await view(request, *args, **kwargs)

        return markcoroutinefunction(async_wrapper)

    @wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any):
        if not _has_valid_key(request):
            return _unauthorized()
        return view(request, *args, **kwargs)

    return wrapper
