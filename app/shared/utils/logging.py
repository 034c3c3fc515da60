# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Sets up the service's logging so that everything the garden engine does is written down
# in a structured way, tagged with who did it and which couple's garden it touched.

# 🧪 Purpose (Technical Summary):
# Structured logging with python-json-logger, context variables for request/user/couple
# correlation, and a setup function driven by settings.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Request context tracking

# 🔄 Connected Modules / Calls From:
# Used by: app.main (startup), presentation dependencies (context binding),
# garden engine and store (contextual records)

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from pythonjsonlogger import jsonlogger

from app.shared.config.settings import get_settings

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')
couple_key_var: ContextVar[str] = ContextVar('couple_key', default='')

_logging_configured = False

SERVICE_NAME = 'shared-garden-api'


class ContextFilter(logging.Filter):
    """
    Adds request ID, user ID and couple key to every record so both
    formatters can reference them.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # Values passed through `extra=` win over the ambient context
        for name, var in (
            ('request_id', request_id_var),
            ('user_id', user_id_var),
            ('couple_key', couple_key_var),
        ):
            if not getattr(record, name, ''):
                setattr(record, name, var.get(''))
        record.service = SERVICE_NAME
        return True


class JSONFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for structured logging.

    Outputs logs in JSON format with consistent structure for
    log aggregation and analysis tools.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = SERVICE_NAME

        # Empty context values only add noise
        for key in ('request_id', 'user_id', 'couple_key'):
            value = getattr(record, key, '')
            if value:
                log_record[key] = value
            else:
                log_record.pop(key, None)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Setup application logging configuration.

    Args:
        log_level: Overrides LOG_LEVEL
        log_format: 'json' or 'text', overrides LOG_FORMAT
        log_file: Optional file to mirror console output into
        enable_console: Attach a stdout handler

    Returns:
        The startup logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger("startup")

    settings = get_settings()
    log_level = log_level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT
    log_file = log_file or settings.LOG_FILE

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format.lower() == 'json':
        formatter: logging.Formatter = JSONFormatter('%(message)s %(module)s %(funcName)s %(lineno)d')
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(couple_key)s] %(message)s'
        )

    context_filter = ContextFilter()
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(context_filter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        root_logger.addHandler(file_handler)

    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )

    _logging_configured = True
    return logging.getLogger("startup")


@contextmanager
def log_context(
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
    couple_key: Optional[str] = None
):
    """
    Context manager for adding contextual information to logs.

    Args:
        request_id: Request identifier (generated when omitted)
        user_id: Acting user
        couple_key: Garden being touched
    """
    if request_id is None:
        request_id = str(uuid4())

    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id or '')
    couple_token = couple_key_var.set(couple_key or '')

    try:
        yield {
            'request_id': request_id,
            'user_id': user_id,
            'couple_key': couple_key
        }
    finally:
        request_id_var.reset(request_token)
        user_id_var.reset(user_token)
        couple_key_var.reset(couple_token)
