import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger('django.request')


def _route_name(request: HttpRequest) -> str:
    match = getattr(request, 'resolver_match', None)
    if match is None:
        return '-'
    return match.view_name or match.route or '-'


def _caller(request: HttpRequest) -> str:
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.username
    return 'anonymous'


class SlowRequestLoggingMiddleware:
    """Warn about API requests that exceed ``SLOW_REQUEST_LOG_MS``.

    Static files are skipped. Publishing and submitting are the write paths
    that take row locks, so the route name is logged to tell them apart.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response
        self.static_prefix = getattr(settings, 'STATIC_URL', '/static/') or '/static/'
        if not self.static_prefix.startswith('/'):
            self.static_prefix = '/' + self.static_prefix

    def __call__(self, request: HttpRequest):
        if not getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True) or request.path.startswith(self.static_prefix):
            return self.get_response(request)

        threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if elapsed_ms >= threshold_ms:
            logger.warning(
                'SLOW_REQUEST method=%s route=%s path=%s status=%s duration_ms=%.2f user=%s',
                request.method,
                _route_name(request),
                request.path,
                getattr(response, 'status_code', 'NA'),
                elapsed_ms,
                _caller(request),
            )
        return response
