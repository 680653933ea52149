from __future__ import annotations

from django.apps import apps


def admin_mode(request):
    """Expose admin mode and the storage mode to all templates.

    Admin mode is a UI toggle stored in the session as 'admin_mode'.
    """
    store = apps.get_app_config('quotes').store
    return {
        "admin_mode": bool(request and request.session.get('admin_mode')),
        "remote_store": bool(store and store.is_remote),
    }
