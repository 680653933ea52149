from django.apps import AppConfig


class QuotesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'quotes'

    store = None

    def ready(self):  # type: ignore[override]
        # Build the store (no network yet; quotes load on first request)
        from django.conf import settings

        from .backends import backend_from_settings
        from .store import QuoteStore

        self.store = QuoteStore(
            backend_from_settings(),
            load_limit=getattr(settings, 'QUOTES_LOAD_LIMIT', 200),
            refresh_limit=getattr(settings, 'QUOTES_REFRESH_LIMIT', 500),
        )
