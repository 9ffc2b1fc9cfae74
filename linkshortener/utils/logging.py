"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once from the entry point (CLI or
embedding application) before any other logging is done.

Logging format:
{
    "timestamp": "2026-10-18T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkshortener.services.resolver",
    "message": "Redirecting client to destination URL.",
    "component": "resolver",
    "event": "REDIRECT_SUCCESS",
    "shortcode": "abc123"
}

Diagnostic sink:
    When a sink URL is given (DIAGNOSTIC_SINK_URL), every record is also
    forwarded as `{"stack", "level", "package", "message"}` JSON to that
    endpoint. Forwarding happens on a background QueueListener thread, and a
    failing sink never raises into the caller.
"""

import os
import json
import queue
import atexit
import logging
import logging.config
import logging.handlers
import urllib.request
from datetime import datetime, UTC

from linkshortener.constants import ENV, Defaults


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


class DiagnosticSinkHandler(logging.Handler):
    """Forward `{stack, level, package, message}` events to an HTTP log collector

    The package is taken from the record's `component` extra, falling back
    to the last segment of the logger name.

    Args:
        url (str): collector endpoint accepting JSON POST requests
        stack (str): origin tag sent with every event
        timeout (float): per-request timeout in seconds
    """

    def __init__(self, url: str, stack: str = 'backend', timeout: float = Defaults.SINK_TIMEOUT_SECONDS):
        super().__init__()
        self.url = url
        self.stack = stack
        self.timeout = timeout

    def payload(self, record: logging.LogRecord) -> dict[str, str]:
        return {
            'stack': self.stack,
            'level': record.levelname.lower(),
            'package': getattr(record, 'component', None) or record.name.rsplit('.', 1)[-1],
            'message': record.getMessage(),
        }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            request = urllib.request.Request(
                self.url,
                data=json.dumps(self.payload(record)).encode('utf-8'),
                headers={'Content-Type': 'application/json'},
                method='POST',
            )
            with urllib.request.urlopen(request, timeout=self.timeout):  # noqa: S310
                pass
        except Exception:  # noqa: BLE001 logging handlers must never raise
            self.handleError(record)


# (logger name, sink url) -> running listener and the QueueHandler feeding it
_sinks: dict[tuple[str, str], tuple[logging.handlers.QueueListener, logging.handlers.QueueHandler]] = {}


def attach_diagnostic_sink(url: str, logger: logging.Logger | None = None) -> logging.handlers.QueueListener:
    """Attach a non-blocking DiagnosticSinkHandler to `logger` (root by default).

    Idempotent per (logger, url): repeated calls reuse the running listener
    and only re-add its QueueHandler when it was removed from the logger
    (e.g. by a later dictConfig() call).

    Returns:
        QueueListener: the started listener; it is stopped at interpreter exit.
    """
    logger = logger or logging.getLogger()
    key = (logger.name, url)

    if key in _sinks:
        listener, handler = _sinks[key]
        if handler not in logger.handlers:
            logger.addHandler(handler)
        return listener

    records: queue.SimpleQueue = queue.SimpleQueue()
    listener = logging.handlers.QueueListener(records, DiagnosticSinkHandler(url), respect_handler_level=True)
    handler = logging.handlers.QueueHandler(records)
    logger.addHandler(handler)
    listener.start()
    atexit.register(listener.stop)
    _sinks[key] = (listener, handler)
    return listener


def initialize_logging(sink_url: str | None = None) -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stderr': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stderr',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stderr'],
            },
        }
    )

    sink_url = sink_url or os.getenv(ENV.Diagnostics.SINK_URL)
    if sink_url:
        attach_diagnostic_sink(sink_url)
