"""
Settings for restock_server, read from the `RESTOCK_SERVER` dict in Django
settings.

Example
-------
>>> RESTOCK_SERVER = {
...     "API_KEY": os.environ["SECRET_KEY"],
...     "RESTOCK_INTERVAL": 300,
...     "MAX_WAITERS": 1000,
... }
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULTS: dict[str, Any] = {
    "API_KEY": None,
    "RESTOCK_INTERVAL": 300,
    "TICK_SECONDS": 1.0,
    "MAX_WAITERS": 1000,
    "MAX_WAIT_SECONDS": None,
    "NOTIFY_ON_STOCK_EDIT": True,
    "AUTOSTART_TIMER": True,
    "CATALOG": None,
}


@dataclass(frozen=True)
class StockServerSettings:
    api_key: str | None
    restock_interval: int
    tick_seconds: float
    max_waiters: int | None
    max_wait_seconds: float | None
    notify_on_stock_edit: bool
    autostart_timer: bool
    catalog: list[dict[str, Any]] | None

    def require_api_key(self) -> str:
        """The shared secret, or ImproperlyConfigured when it is unset."""
        if not self.api_key:
            raise ImproperlyConfigured(
                "RESTOCK_SERVER['API_KEY'] is not set; refusing to serve "
                "authenticated endpoints without a shared secret."
            )
        return self.api_key


def get_settings() -> StockServerSettings:
    user = getattr(settings, "RESTOCK_SERVER", {}) or {}
    unknown = set(user) - set(DEFAULTS)
    if unknown:
        raise ImproperlyConfigured(
            f"Unknown RESTOCK_SERVER keys: {sorted(unknown)}. "
            f"Available: {sorted(DEFAULTS)}"
        )
    merged = {**DEFAULTS, **user}
    return StockServerSettings(**{f.name: merged[f.name.upper()] for f in fields(StockServerSettings)})
