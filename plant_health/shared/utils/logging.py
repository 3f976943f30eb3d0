# 📄 File: plant_health/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Sets up the app's diary: every message records which request and which user it belongs to,
# so when a photo upload or a diagnosis goes wrong we can follow exactly what happened.

# 🧪 Purpose (Technical Summary):
# Structured logging with JSON output (python-json-logger), request/user context carried in
# contextvars, and a StructuredLogger wrapper for business events and external call timing.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Request context tracking

# 🔄 Connected Modules / Calls From:
# plant_health.main (setup), RequestLoggingMiddleware (log_context), upload pipeline,
# diagnosis oracles, audit event handler

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from pythonjsonlogger import jsonlogger

from plant_health.shared.config.settings import get_settings

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

SERVICE_NAME = 'plant-health-api'

_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


class ContextFilter(logging.Filter):
    """
    Attach request context to every record.

    Handlers carry this filter, so third-party loggers get the request id too.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get('')
        record.user_id = user_id_var.get('')
        record.service = SERVICE_NAME
        return True


class JSONFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per line with a consistent structure for
    log aggregation tools. Structured extras passed through
    ``StructuredLogger`` are nested under ``extra``.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('json_ensure_ascii', False)
        super().__init__(*args, **kwargs)
        self.hostname = os.uname().nodename if hasattr(os, 'uname') else 'unknown'

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno
        log_record['service'] = SERVICE_NAME
        log_record['hostname'] = self.hostname

        request_id = getattr(record, 'request_id', '')
        if request_id:
            log_record['request_id'] = request_id
        user_id = getattr(record, 'user_id', '')
        if user_id:
            log_record['user_id'] = user_id

        extra_fields = log_record.pop('extra_fields', None)
        if extra_fields:
            log_record['extra'] = extra_fields


class TextFormatter(logging.Formatter):
    """Human readable formatter that still shows the request id."""

    def __init__(self):
        super().__init__('%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'request_id'):
            record.request_id = request_id_var.get('')
        return super().format(record)


class StructuredLogger:
    """
    Logger wrapper with structured logging helpers.

    Keyword arguments passed to the level methods become structured fields
    on the record rather than being formatted into the message.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        """Log debug message with extra fields."""
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        """Log info message with extra fields."""
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        """Log warning message with extra fields."""
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        """Log error message with extra fields."""
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        extra_fields = dict(extra or {})

        for key, value in kwargs.items():
            if key not in ['exc_info', 'stack_info', 'stacklevel']:
                extra_fields[key] = value

        clean_kwargs = {k: v for k, v in kwargs.items()
                        if k in ['exc_info', 'stack_info', 'stacklevel']}

        if extra_fields:
            clean_kwargs['extra'] = {'extra_fields': extra_fields}

        self.logger.log(level, message, **clean_kwargs)

    def log_business_event(
        self,
        event_type: str,
        description: str,
        entity_id: str = None,
        entity_type: str = None,
        extra: Dict = None
    ):
        """Log business events (plant diagnosed, plant deleted, ...) for the audit trail."""
        extra_fields = {
            'event_type': 'business_event',
            'business_event_type': event_type,
            **(extra or {})
        }

        if entity_id:
            extra_fields['entity_id'] = entity_id
        if entity_type:
            extra_fields['entity_type'] = entity_type

        self.info(description, extra=extra_fields)

    def log_external_call(
        self,
        service: str,
        operation: str,
        duration_ms: float,
        status: str = 'success',
        status_code: Optional[int] = None,
        extra: Dict = None
    ):
        """Log an outbound call to storage or the diagnosis oracle."""
        extra_fields = {
            'event_type': 'external_call',
            'service': service,
            'operation': operation,
            'duration_ms': round(duration_ms, 2),
            'status': status,
            **(extra or {})
        }
        if status_code is not None:
            extra_fields['status_code'] = status_code

        level = logging.INFO if status == 'success' else logging.WARNING
        self._log(level, f"{service} {operation} - {status} - {duration_ms:.2f}ms", extra_fields)


def setup_logging(
    log_level: str = None,
    log_format: str = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Setup application logging configuration.

    Args:
        log_level: Level name, defaults to settings.LOG_LEVEL
        log_format: 'json' or 'text', defaults to settings.LOG_FORMAT
        enable_console: Attach a stdout handler

    Returns:
        The 'startup' logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger("startup")

    settings = get_settings()
    log_level = log_level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format.lower() == 'json':
        formatter = JSONFormatter('%(message)s')
    else:
        formatter = TextFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(ContextFilter())
        root_logger.addHandler(console_handler)

    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )

    _logging_configured = True
    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        StructuredLogger instance
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = StructuredLogger(name)
    _loggers_cache[name] = logger

    return logger


@contextmanager
def log_context(request_id: str = None, user_id: str = None):
    """
    Context manager binding request/user identifiers to every log line inside it.

    Args:
        request_id: Request identifier, generated when omitted
        user_id: Authenticated owner identifier
    """
    if request_id is None:
        request_id = str(uuid4())

    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id or '')

    try:
        yield {'request_id': request_id, 'user_id': user_id}
    finally:
        request_id_var.reset(request_token)
        user_id_var.reset(user_token)


def log_startup_event(service_name: str, version: str, extra: Dict = None):
    """Log application startup event."""
    logger = get_logger('startup')
    logger.info(
        f"Service {service_name} starting up",
        extra={
            'event_type': 'service_startup',
            'service_name': service_name,
            'version': version,
            **(extra or {})
        }
    )


def log_shutdown_event(service_name: str, extra: Dict = None):
    """Log application shutdown event."""
    logger = get_logger('shutdown')
    logger.info(
        f"Service {service_name} shutting down",
        extra={
            'event_type': 'service_shutdown',
            'service_name': service_name,
            **(extra or {})
        }
    )
