from django.apps import AppConfig


class RestockServerConfig(AppConfig):
    name = "restock_server"
    verbose_name = "Restock server"

    def ready(self) -> None:
        from .api import get_server
        from .conf import get_settings

        conf = get_settings()
        if not conf.autostart_timer:
            return
        # Fail at startup, not on the first request, when the secret is missing.
        conf.require_api_key()
        get_server().start()
