"""
Граница с хранилищем.

Любой сбой соединения/таймаут БД превращается в TransientStorageError,
чтобы вызывающий код отличал "повтори позже" от ошибок валидации.
IntegrityError сюда не попадает: это не транзиентная ошибка.

Использование:

    @storage_call
    def join_classroom(...):
        ...

    with storage_call('clone_master_curriculum'):
        ...
"""
import functools
import logging
import time

from django.db import InterfaceError, OperationalError

from .exceptions import TransientStorageError

logger = logging.getLogger(__name__)

# Логируем операции дольше этого порога (как slow-query диагностика)
SLOW_OPERATION_MS = 500

TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError)


class _StorageCall:
    def __init__(self, name):
        self.name = name
        self._started = None

    def __enter__(self):
        self._started = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb):
        elapsed_ms = (time.monotonic() - self._started) * 1000
        if exc_type is not None and issubclass(exc_type, TRANSIENT_DB_ERRORS):
            logger.warning(
                'Transient storage failure: op=%s, elapsed=%.1fms, error=%s',
                self.name, elapsed_ms, exc,
            )
            raise TransientStorageError() from exc
        if elapsed_ms > SLOW_OPERATION_MS:
            logger.warning('Slow storage operation: op=%s, elapsed=%.1fms', self.name, elapsed_ms)
        return False

    def __call__(self, func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with _StorageCall(self.name or func.__qualname__):
                return func(*args, **kwargs)
        return wrapper


def storage_call(name_or_func=None):
    """Декоратор или context manager; см. docstring модуля."""
    if callable(name_or_func):
        return _StorageCall(name_or_func.__qualname__)(name_or_func)
    return _StorageCall(name_or_func)
