import random

import pytest

from restock_server.catalog import Catalog, ItemDefinition


def pytest_configure() -> None:
    """Configure a minimal Django project once per test run (no database)."""
    from django.conf import settings

    if settings.configured:
        return

    settings.configure(
        SECRET_KEY="test",
        INSTALLED_APPS=["restock_server"],
        ROOT_URLCONF="restock_server.urls",
        ALLOWED_HOSTS=["testserver"],
        RESTOCK_SERVER={"API_KEY": "test-key", "AUTOSTART_TIMER": False},
        TIME_ZONE="UTC",
        USE_TZ=True,
    )

    import django

    django.setup()


@pytest.fixture
def catalog() -> Catalog:
    # Chances of 1.0 and 0.0 make presence deterministic for the first and last item.
    return Catalog(
        [
            ItemDefinition("Sword", "Common", 1.0, 2, 4),
            ItemDefinition("Shield", "Rare", 0.5, 1, 3),
            ItemDefinition("Relic", "Legendary", 0.0, 1, 1),
        ]
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def default_server():
    """The process-wide server, rebuilt from settings for each test."""
    from restock_server.api import get_server, reset_server

    reset_server()
    yield get_server()
    reset_server()
