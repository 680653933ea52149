from __future__ import annotations

import os

import pytest


@pytest.fixture(scope="session", autouse=True)
def allow_async_unsafe() -> None:
    """Allow Django calls while Playwright's event loop is running in E2E tests."""
    os.environ.setdefault("DJANGO_ALLOW_ASYNC_UNSAFE", "1")


@pytest.fixture(autouse=True)
def local_only(settings):  # type: ignore[no-untyped-def]
    """Never talk to a real remote table from tests."""
    settings.SUPABASE_URL = ''
    settings.SUPABASE_ANON_KEY = ''
