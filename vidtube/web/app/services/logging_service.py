"""
Logging Service for VidTube
Provides structured logging with JSON format and request correlation IDs.
"""

import json
import logging
import logging.config
import sys
import time
import traceback
import uuid
from datetime import datetime
from typing import Optional
from contextvars import ContextVar
from pathlib import Path

from ..config import Settings

# Context variables for request correlation
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime',
}

class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data = {
            'timestamp': datetime.utcnow().isoformat() + 'Z',
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        # Add context variables if available
        if request_id_var.get():
            log_data['request_id'] = request_id_var.get()

        if user_id_var.get():
            log_data['user_id'] = user_id_var.get()

        # Add exception information if present
        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Add extra fields from the log record
        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }
        if extra_fields:
            log_data['extra'] = extra_fields

        return json.dumps(log_data, default=str, ensure_ascii=False)

class LoggingService:
    """Service for managing application logging"""

    def configure(self, settings: Settings):
        """Apply the logging configuration for the web process"""
        formatter = 'json' if settings.LOG_JSON else 'simple'
        handlers = {
            'console': {
                'class': 'logging.StreamHandler',
                'level': settings.LOG_LEVEL,
                'formatter': formatter,
                'stream': sys.stdout
            }
        }
        app_handlers = ['console']

        if settings.LOG_DIR:
            log_dir = Path(settings.LOG_DIR)
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers['file_all'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'DEBUG',
                'formatter': 'json',
                'filename': str(log_dir / 'application.log'),
                'maxBytes': 100 * 1024 * 1024,  # 100MB
                'backupCount': 10
            }
            handlers['file_error'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'ERROR',
                'formatter': 'json',
                'filename': str(log_dir / 'error.log'),
                'maxBytes': 50 * 1024 * 1024,  # 50MB
                'backupCount': 5
            }
            app_handlers += ['file_all', 'file_error']

        config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JSONFormatter,
                },
                'simple': {
                    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                }
            },
            'handlers': handlers,
            'loggers': {
                'vidtube': {
                    'level': settings.LOG_LEVEL,
                    'handlers': app_handlers,
                    'propagate': False
                },
                'uvicorn': {
                    'level': 'INFO',
                    'handlers': ['console'],
                    'propagate': False
                },
                'sqlalchemy': {
                    'level': 'WARNING',
                    'handlers': ['console'],
                    'propagate': False
                }
            },
            'root': {
                'level': settings.LOG_LEVEL,
                'handlers': ['console']
            }
        }

        logging.config.dictConfig(config)

    def set_request_context(self, request_id: str, user_id: str = None):
        """Set request context for logging"""
        request_id_var.set(request_id)
        if user_id:
            user_id_var.set(user_id)

    def clear_request_context(self):
        """Clear request context"""
        request_id_var.set(None)
        user_id_var.set(None)

logging_service = LoggingService()

# Middleware for request logging
class LoggingMiddleware:
    """Middleware for request/response logging"""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger("vidtube.api")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        start_time = time.time()

        logging_service.set_request_context(request_id)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                duration_ms = round((time.time() - start_time) * 1000, 2)
                self.logger.info(
                    "%s %s - %s (%sms)", scope["method"], scope["path"], message["status"], duration_ms,
                    extra={
                        'event_type': 'api_request',
                        'method': scope["method"],
                        'endpoint': scope["path"],
                        'status_code': message["status"],
                        'duration_ms': duration_ms,
                    }
                )
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logging_service.clear_request_context()
