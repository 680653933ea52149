from __future__ import annotations

import re

import pytest
from django.apps import apps

from quotes.backends import NullBackend
from quotes.store import QuoteStore


@pytest.fixture
def fresh_store():  # type: ignore[no-untyped-def]
    config = apps.get_app_config('quotes')
    orig = config.store
    config.store = QuoteStore(NullBackend())
    yield config.store
    config.store = orig


@pytest.mark.e2e
@pytest.mark.django_db(transaction=True)
def test_admin_imports_csv_and_searches(page, live_server, fresh_store, tmp_path):  # type: ignore[no-untyped-def]
    csv_file = tmp_path / "quotes.csv"
    csv_file.write_text("الصبر مفتاح الفرج,مثل عربي\n,تخطى\n", encoding="utf-8")

    base = live_server.url
    page.goto(f"{base}/")
    page.locator('#toggle-admin').click()
    page.wait_for_selector('#admin-panel')

    page.locator('input[type="file"]').set_input_files(str(csv_file))
    page.get_by_role('button', name='معاينة', exact=True).click()
    page.wait_for_selector('#preview')
    assert 'معاينة قبل الاستيراد (1)' in page.content()

    page.locator('#confirm-import').click()
    page.wait_for_url(re.compile(r"/$"), timeout=7000)
    assert '(محليًا)' in page.content()
    assert fresh_store.all()[0].text == 'الصبر مفتاح الفرج'

    page.locator('input[name="q"]').fill('الصبر')
    page.locator('input[name="q"]').press('Enter')
    page.wait_for_url(re.compile(r"\?q="), timeout=7000)
    assert page.locator('article.card').count() == 1
