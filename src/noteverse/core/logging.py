"""
Logging configuration for NoteVerse.

Console output is JSON in production and coloured in debug mode; everything
under the ``noteverse`` namespace is also written to rotating files in
``settings.log_dir``.
"""
import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import Settings, get_settings

# LogRecord attributes that are not user supplied "extra" fields
_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'exc_info', 'exc_text', 'stack_info', 'lineno', 'funcName', 'created', 'msecs',
    'relativeCreated', 'thread', 'threadName', 'processName', 'process', 'taskName',
    'message', 'asctime',
})

_LEVELS = {
    'CRITICAL': logging.CRITICAL,
    'ERROR': logging.ERROR,
    'WARNING': logging.WARNING,
    'INFO': logging.INFO,
    'DEBUG': logging.DEBUG,
}

REQUEST_ID_HEADER = b'x-request-id'


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` fields nested under "extra"."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }

        extra = _extra_fields(record)
        if extra:
            entry['extra'] = extra

        return json.dumps(entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Level-coloured console output for local development."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # the record is shared with the file handlers, colour a copy
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        line = super().format(record)

        extra = _extra_fields(record)
        if extra:
            line += " " + " ".join(f"{key}={value}" for key, value in extra.items())
        return line


def get_log_level(level_str: Optional[str] = None) -> int:
    """Map a level name to its logging constant, INFO when unknown."""
    level_str = level_str or get_settings().log_level
    return _LEVELS.get(level_str.upper(), logging.INFO)


def _handlers(settings: Settings, log_dir: Path) -> Dict[str, Dict[str, Any]]:
    rotating = {
        'class': 'logging.handlers.RotatingFileHandler',
        'maxBytes': 10_000_000,
        'backupCount': 5,
        'encoding': 'utf-8',
    }
    return {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if settings.debug else 'json',
            'stream': sys.stdout,
            'level': get_log_level(settings.log_level),
        },
        'file': {
            **rotating,
            'filename': str(log_dir / 'noteverse.log'),
            'formatter': 'plain',
            'level': 'DEBUG',
        },
        'error_file': {
            **rotating,
            'filename': str(log_dir / 'error.log'),
            'formatter': 'json',
            'level': 'ERROR',
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure console and rotating file logging from settings."""
    settings = settings or get_settings()

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {'()': JSONFormatter},
            'colored': {
                '()': ColoredFormatter,
                'format': settings.log_format,
                'datefmt': '%H:%M:%S',
            },
            'plain': {
                'format': '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
        },
        'handlers': _handlers(settings, log_dir),
        'root': {'handlers': ['console'], 'level': 'WARNING'},
        'loggers': {
            'noteverse': {
                'handlers': ['console', 'file', 'error_file'],
                'level': 'DEBUG',
                'propagate': False,
            },
            'uvicorn': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
            'sqlalchemy.engine': {
                'handlers': ['file'],
                'level': 'INFO' if settings.database_echo else 'WARNING',
                'propagate': False,
            },
            'alembic': {'handlers': ['console', 'file'], 'level': 'INFO', 'propagate': False},
        },
    }

    logging.config.dictConfig(config)

    get_logger('logging').info("Logging configured", extra={
        'log_level': settings.log_level,
        'log_dir': str(log_dir),
        'environment': settings.environment,
    })


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the noteverse namespace."""
    return logging.getLogger(f"noteverse.{name}")


class LoggingMiddleware:
    """ASGI middleware logging one line per request with status and duration.

    Reuses an incoming ``X-Request-ID`` header or generates one, and echoes it
    on the response so client reports can be matched with server logs.
    """

    # probed by load balancers every few seconds
    QUIET_PATHS = frozenset({'/health'})

    def __init__(self, app, logger_name: str = "http"):
        self.app = app
        self.logger = get_logger(logger_name)

    def _request_id(self, scope) -> str:
        for name, value in scope.get('headers', []):
            if name == REQUEST_ID_HEADER and value:
                return value.decode('latin-1')[:64]
        return uuid.uuid4().hex

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        request_id = self._request_id(scope)
        fields = {
            'request_id': request_id,
            'method': scope['method'],
            'path': scope['path'],
            'client_ip': scope['client'][0] if scope.get('client') else None,
        }

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                status_code = message.get('status', 0)
                message.setdefault('headers', [])
                message['headers'] = list(message['headers']) + [
                    (REQUEST_ID_HEADER, request_id.encode('latin-1'))
                ]
                self._log_response(fields, status_code, started)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as exc:
            self.logger.error("Unhandled error", exc_info=exc, extra={
                **fields,
                'duration_ms': round((time.perf_counter() - started) * 1000, 2),
            })
            raise

    def _log_response(self, fields: Dict[str, Any], status_code: int, started: float) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        elif fields['path'] in self.QUIET_PATHS:
            level = logging.DEBUG
        else:
            level = logging.INFO
        self.logger.log(level, "%s %s -> %s", fields['method'], fields['path'], status_code, extra={
            **fields,
            'status_code': status_code,
            'duration_ms': round((time.perf_counter() - started) * 1000, 2),
        })
