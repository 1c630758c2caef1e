"""
Health check endpoints для мониторинга и оркестратора.
"""
import time

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse


def _database_ok():
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as exc:
        return False, f'error: {str(exc)[:100]}'
    return True, 'ok'


def health_check(request):
    """
    200 если всё работает, 500 если есть критические проблемы.

    Проверяет соединение с БД и наличие критических настроек.
    """
    status = {
        'status': 'healthy',
        'timestamp': time.time(),
        'version': getattr(settings, 'VERSION', '1.0.0'),
        'checks': {},
    }

    ok, detail = _database_ok()
    status['checks']['database'] = detail
    if not ok:
        status['status'] = 'unhealthy'

    missing = [name for name in ('SECRET_KEY', 'SIMPLE_JWT') if not getattr(settings, name, None)]
    if missing:
        status['status'] = 'unhealthy'
        status['checks']['settings'] = f"missing: {', '.join(missing)}"
    else:
        status['checks']['settings'] = 'ok'

    status['checks']['completion_service'] = 'configured' if settings.GEMINI_API_KEY else 'not configured'

    http_status = 200 if status['status'] == 'healthy' else 500
    return JsonResponse(status, status=http_status)


def ready_check(request):
    """Readiness probe - готово ли приложение обслуживать запросы."""
    ok, _ = _database_ok()
    if ok:
        return JsonResponse({'ready': True})
    return JsonResponse({'ready': False}, status=503)


def live_check(request):
    """Liveness probe - минимальная проверка, что процесс жив."""
    return JsonResponse({'alive': True, 'timestamp': time.time()})
