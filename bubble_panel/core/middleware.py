"""
Middleware для сбора метрик запросов.
"""
import logging
import time

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger('request_metrics')

SLOW_REQUEST_SECONDS = 2.0


class RequestMetricsMiddleware(MiddlewareMixin):
    """
    Логирует каждый запрос одной строкой key=value:
    метод, путь, статус, длительность, пользователь, школа.
    """

    def process_request(self, request):
        request._start_time = time.time()
        return None

    def process_response(self, request, response):
        if not hasattr(request, '_start_time'):
            return response

        duration = time.time() - request._start_time
        user = getattr(request, 'user', None)
        user_id = 'anonymous'
        school_id = '-'
        if user is not None and user.is_authenticated:
            user_id = user.pk
            school_id = getattr(user, 'school_id', None) or '-'

        logger.info(
            f"method={request.method} "
            f"path={request.path} "
            f"status={response.status_code} "
            f"duration={duration:.3f}s "
            f"user={user_id} "
            f"school={school_id}"
        )
        response['X-Request-Duration'] = f"{duration:.3f}"

        if duration > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"SLOW_REQUEST: {request.method} {request.path} "
                f"took {duration:.3f}s (user={user_id})"
            )
        return response
