"""
ASGI entrypoint. Serve long-poll requests with an ASGI server so that a client
disconnect cancels the waiting view, e.g.:

    uvicorn restock_site.asgi:application --port "${PORT:-10000}"
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "restock_site.settings")

application = get_asgi_application()
