"""
Thread-safe logging handler для многопоточного Gunicorn (gthread).

Стандартный logging.StreamHandler может упасть с
RuntimeError: reentrant call inside <_io.BufferedWriter name='<stderr>'>
при одновременной записи из нескольких потоков.
"""
import logging
import threading


class ThreadSafeStreamHandler(logging.StreamHandler):
    """StreamHandler, сериализующий запись через общий RLock."""

    _write_lock = threading.RLock()

    def emit(self, record):
        try:
            msg = self.format(record)
            with self._write_lock:
                self.stream.write(msg + self.terminator)
                self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
