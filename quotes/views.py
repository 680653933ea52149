from __future__ import annotations

import logging
from functools import wraps

from django.apps import apps
from django.conf import settings
from django.contrib import messages
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .exceptions import PersistenceError, WorkflowError
from .forms import ImportFileForm, ManualQuoteForm, PosterForm
from .importer import decode_upload, parse_import
from .poster import render_poster
from .preview import CommitLock, PreviewWorkflow
from .records import Quote, share_text
from .store import QuoteStore

logger = logging.getLogger(__name__)

SELECTED_KEY = 'quotes_selected'


def get_store() -> QuoteStore:
    return apps.get_app_config('quotes').store


def _session_key(request) -> str:
    if not request.session.session_key:
        request.session.save()
    return request.session.session_key


def get_workflow(request) -> PreviewWorkflow:
    return PreviewWorkflow(get_store(), request.session, CommitLock(_session_key(request)))


def _admin_required(view):
    @wraps(view)
    def wrapped(request, *args, **kwargs):
        if not request.session.get('admin_mode'):
            return redirect('index')
        return view(request, *args, **kwargs)
    return wrapped


@require_GET
def index(request):
    store = get_store()
    q = request.GET.get('q', '')
    quotes = store.filter(q)
    cards = [{'quote': item, 'share': share_text(item)} for item in quotes]
    ctx = {
        'q': q,
        'cards': cards,
        'total': len(store),
    }
    if request.session.get('admin_mode'):
        wf = get_workflow(request)
        batch = wf.batch
        limit = int(getattr(settings, 'QUOTES_PREVIEW_DISPLAY_LIMIT', 200))
        ctx.update({
            'preview': batch[:limit],
            'preview_count': len(batch),
            'preview_status': wf.status,
            'import_form': ImportFileForm(),
            'manual_form': ManualQuoteForm(),
        })
    return render(request, 'quotes/index.html', ctx)


@require_POST
def toggle_admin(request):
    """Toggle admin mode and redirect back."""
    request.session['admin_mode'] = not request.session.get('admin_mode', False)
    return redirect('index')


@require_POST
@_admin_required
def import_file(request):
    form = ImportFileForm(request.POST, request.FILES)
    if not form.is_valid():
        messages.error(request, "الرجاء اختيار ملف للاستيراد.")
        return redirect('index')
    upload = form.cleaned_data['file']
    result = parse_import(upload.name, decode_upload(upload.read()))
    if result.error:
        messages.error(request, result.error)
        return redirect('index')
    try:
        count = get_workflow(request).start_preview(result.quotes)
    except WorkflowError as e:
        messages.warning(request, str(e))
        return redirect('index')
    logger.info("Previewing %s quote(s) from %s", count, upload.name)
    return redirect('index')


@require_POST
@_admin_required
def import_confirm(request):
    store = get_store()
    try:
        count = get_workflow(request).commit()
    except WorkflowError as e:
        messages.warning(request, str(e))
    except PersistenceError as e:
        logger.warning("Import commit failed: %s", e)
        messages.error(request, "حدث خطأ أثناء حفظ الاقتباسات في قاعدة البيانات.")
    else:
        if store.is_remote:
            messages.success(request, f"تم استيراد {count} اقتباسًا إلى قاعدة البيانات.")
        else:
            messages.success(request, f"تم إضافة {count} اقتباسًا (محليًا).")
    return redirect('index')


@require_POST
@_admin_required
def import_cancel(request):
    get_workflow(request).cancel_preview()
    return redirect('index')


@require_POST
@_admin_required
def quote_add(request):
    form = ManualQuoteForm(request.POST)
    quote = form.to_quote() if form.is_valid() else None
    if quote is None:
        messages.error(request, "الرجاء إدخال نص الاقتباس.")
        return redirect('index')
    try:
        get_store().add(quote)
    except PersistenceError as e:
        logger.warning("Manual add failed: %s", e)
        messages.error(request, "خطأ أثناء الإضافة")
    else:
        messages.success(request, "تمت إضافة الاقتباس.")
    return redirect('index')


@require_http_methods(["GET", "POST"])
def poster(request):
    """Download the selected quote as a PNG poster.

    POST selects a quote (text/author) and downloads it; GET downloads the
    current selection. Without a selection there is nothing to render.
    """
    if request.method == 'POST':
        form = PosterForm(request.POST)
        quote = form.to_quote() if form.is_valid() else None
        if quote is None:
            raise Http404("No quote selected")
        request.session[SELECTED_KEY] = quote.to_dict()
    else:
        selected = request.session.get(SELECTED_KEY)
        if not selected:
            raise Http404("No quote selected")
        quote = Quote(**selected)
    image = render_poster(quote)
    resp = HttpResponse(image.data, content_type=image.content_type)
    resp['Content-Disposition'] = f'attachment; filename="{image.filename}"'
    return resp


@require_GET
def api_quotes(request):
    store = get_store()
    quotes = store.filter(request.GET.get('q', ''))
    return JsonResponse(
        {
            'count': len(quotes),
            'remote': store.is_remote,
            'quotes': [item.to_dict() for item in quotes],
        },
        json_dumps_params={'ensure_ascii': False},
    )
