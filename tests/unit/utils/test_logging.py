"""Unit tests for logging utilities in logging.py

Test coverage includes:

1. JSON formatting
   - Ensures records are rendered as JSON with standard fields and extras.
   - Ensures exception info is rendered into an 'exception' field.

2. Diagnostic sink
   - Ensures the forwarded payload has stack, level, package and message.
   - Ensures events are POSTed as JSON to the sink URL.
   - Confirms a failing sink never raises into the caller.

3. Initialization
   - Ensures initialize_logging() honors LOG_LEVEL.
   - Ensures a sink URL attaches a queue-backed handler.
   - Ensures repeated initialization never stacks sink handlers or listeners.
"""

import sys
import json
import logging
import logging.handlers
from unittest.mock import MagicMock

import pytest

from linkshortener.utils import logging as log_utils
from linkshortener.utils.logging import JsonFormatter, DiagnosticSinkHandler, initialize_logging


# -------------------------------
# Fixtures
# -------------------------------


def make_record(msg='Redirecting client to destination URL.', level=logging.INFO, name='linkshortener.services.resolver', **extra):
    record = logging.LogRecord(name, level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def root_logger():
    """Restore root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


# -------------------------------
# 1. JSON formatting
# -------------------------------


def test_json_formatter_includes_extras():
    record = make_record(component='resolver', event='REDIRECT_SUCCESS', shortcode='abc123')

    log = json.loads(JsonFormatter().format(record))

    assert log['level'] == 'INFO'
    assert log['logger'] == 'linkshortener.services.resolver'
    assert log['message'] == 'Redirecting client to destination URL.'
    assert log['component'] == 'resolver'
    assert log['event'] == 'REDIRECT_SUCCESS'
    assert log['shortcode'] == 'abc123'
    assert log['timestamp'].endswith('Z')


def test_json_formatter_serializes_unknown_types():
    record = make_record(shortcodes={'abc123'})
    log = json.loads(JsonFormatter().format(record))
    assert log['shortcodes'] == "{'abc123'}"


def test_json_formatter_renders_exceptions():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = logging.LogRecord('linkshortener', logging.ERROR, __file__, 10, 'failed', None, sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


# -------------------------------
# 2. Diagnostic sink
# -------------------------------


def test_sink_payload_uses_component():
    handler = DiagnosticSinkHandler('http://logs.test/ingest')
    payload = handler.payload(make_record(level=logging.WARNING, component='store'))

    assert payload == {
        'stack': 'backend',
        'level': 'warning',
        'package': 'store',
        'message': 'Redirecting client to destination URL.',
    }


def test_sink_payload_falls_back_to_logger_name():
    handler = DiagnosticSinkHandler('http://logs.test/ingest')
    assert handler.payload(make_record())['package'] == 'resolver'


def test_sink_posts_json(monkeypatch):
    urlopen = MagicMock()
    monkeypatch.setattr(log_utils.urllib.request, 'urlopen', urlopen)

    DiagnosticSinkHandler('http://logs.test/ingest', timeout=1).emit(make_record(component='resolver'))

    request = urlopen.call_args.args[0]
    assert request.full_url == 'http://logs.test/ingest'
    assert request.get_method() == 'POST'
    assert json.loads(request.data)['package'] == 'resolver'
    assert urlopen.call_args.kwargs == {'timeout': 1}


def test_sink_failure_does_not_raise(monkeypatch):
    monkeypatch.setattr(log_utils.urllib.request, 'urlopen', MagicMock(side_effect=OSError('connection refused')))
    handler = DiagnosticSinkHandler('http://logs.test/ingest')
    handler.handleError = MagicMock()

    handler.emit(make_record())

    handler.handleError.assert_called_once()


# -------------------------------
# 3. Initialization
# -------------------------------


def test_initialize_logging_sets_level(monkeypatch, root_logger):
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    monkeypatch.delenv('DIAGNOSTIC_SINK_URL', raising=False)

    initialize_logging()

    assert root_logger.level == logging.DEBUG
    assert any(isinstance(h.formatter, JsonFormatter) for h in root_logger.handlers)


def test_initialize_logging_attaches_sink(monkeypatch, root_logger):
    attach = MagicMock()
    monkeypatch.setattr(log_utils, 'attach_diagnostic_sink', attach)

    initialize_logging('http://logs.test/ingest')

    attach.assert_called_once_with('http://logs.test/ingest')


def test_attach_diagnostic_sink_adds_queue_handler(monkeypatch):
    monkeypatch.setattr(log_utils, '_sinks', {})
    monkeypatch.setattr(log_utils.atexit, 'register', MagicMock())
    logger = logging.getLogger('linkshortener.tests.sink')

    listener = log_utils.attach_diagnostic_sink('http://logs.test/ingest', logger)
    try:
        assert any(isinstance(h, logging.handlers.QueueHandler) for h in logger.handlers)
        assert isinstance(listener.handlers[0], DiagnosticSinkHandler)
    finally:
        listener.stop()
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)


def test_attach_diagnostic_sink_is_idempotent(monkeypatch):
    """Ensure repeated attaches reuse one listener and one QueueHandler."""
    monkeypatch.setattr(log_utils, '_sinks', {})
    register = MagicMock()
    monkeypatch.setattr(log_utils.atexit, 'register', register)
    logger = logging.getLogger('linkshortener.tests.sink.repeat')

    listener = log_utils.attach_diagnostic_sink('http://logs.test/ingest', logger)
    try:
        assert log_utils.attach_diagnostic_sink('http://logs.test/ingest', logger) is listener
        assert sum(isinstance(h, logging.handlers.QueueHandler) for h in logger.handlers) == 1
        register.assert_called_once()

        # a reconfiguration dropped the handler; attaching again restores exactly one
        logger.removeHandler(logger.handlers[0])
        assert log_utils.attach_diagnostic_sink('http://logs.test/ingest', logger) is listener
        assert sum(isinstance(h, logging.handlers.QueueHandler) for h in logger.handlers) == 1
    finally:
        listener.stop()
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)


def test_initialize_logging_twice_keeps_one_sink(monkeypatch, root_logger):
    monkeypatch.setattr(log_utils, '_sinks', {})
    monkeypatch.setattr(log_utils.atexit, 'register', MagicMock())
    monkeypatch.delenv('DIAGNOSTIC_SINK_URL', raising=False)

    initialize_logging('http://logs.test/ingest')
    initialize_logging('http://logs.test/ingest')

    try:
        assert sum(isinstance(h, logging.handlers.QueueHandler) for h in root_logger.handlers) == 1
        assert len(log_utils._sinks) == 1
    finally:
        for listener, _ in log_utils._sinks.values():
            listener.stop()
