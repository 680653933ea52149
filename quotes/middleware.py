from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Callable

from django.http import HttpRequest, HttpResponse

from .preview import PreviewWorkflow

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        req_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.META['HTTP_X_REQUEST_ID'] = req_id
        start = time.time()
        response = self.get_response(request)
        duration_ms = int((time.time() - start) * 1000)
        session = getattr(request, 'session', None)
        payload = {
            'event': 'http_request',
            'id': req_id,
            'method': request.method,
            'path': request.path,
            'status': response.status_code,
            'ms': duration_ms,
            'admin': bool(session.get('admin_mode')) if session is not None else False,
            'pending': len(session.get(PreviewWorkflow.SESSION_KEY) or []) if session is not None else 0,
        }
        logger.info(json.dumps(payload))
        response['X-Request-ID'] = req_id
        return response
