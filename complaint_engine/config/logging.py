"""
Logging configuration for the complaint lifecycle engine.
Provides structured logging with different handlers and formatters.
"""

import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from complaint_engine.config.settings import Settings, get_settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to the log record"""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = get_settings().ENVIRONMENT

        # Lifecycle context passed through `extra=`
        for key in ('complaint_id', 'complaint_number', 'actor_id', 'operation', 'recipient_id'):
            if hasattr(record, key):
                log_record[key] = getattr(record, key)

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Create the dictConfig mapping for the given settings"""
    handlers: Dict[str, Dict[str, Any]] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if settings.is_development() else 'standard'
        },
    }

    if settings.LOG_TO_FILE:
        handlers.update({
            'file': {
                'level': 'INFO',
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': os.path.join(settings.LOG_DIR, 'app.log'),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 10,
                'formatter': 'standard',
                'encoding': 'utf8'
            },
            'error_file': {
                'level': 'ERROR',
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': os.path.join(settings.LOG_DIR, 'error.log'),
                'maxBytes': 10485760,
                'backupCount': 10,
                'formatter': 'standard',
                'encoding': 'utf8'
            },
            'json_file': {
                'level': 'INFO',
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': os.path.join(settings.LOG_DIR, 'app.json.log'),
                'maxBytes': 10485760,
                'backupCount': 10,
                'formatter': 'json',
                'encoding': 'utf8'
            },
        })

    app_handlers = list(handlers)

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s'
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': {
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': app_handlers,
                'level': settings.LOG_LEVEL,
                'propagate': True
            },
            'complaint_engine': {
                'handlers': app_handlers,
                'level': settings.LOG_LEVEL,
                'propagate': False
            },
            'sqlalchemy.engine': {
                'handlers': ['console'],
                'level': 'WARNING',
                'propagate': False
            },
            'uvicorn.access': {
                'handlers': ['console'],
                'level': 'INFO',
                'propagate': False
            }
        }
    }


def _init_sentry(settings: Settings) -> None:
    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    sentry_logging = LoggingIntegration(
        level=logging.INFO,  # Log INFO and above to Sentry
        event_level=logging.ERROR  # Send errors as events
    )

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        integrations=[sentry_logging],
        traces_sample_rate=0.2,
        send_default_pii=False
    )


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure application logging"""
    settings = settings or get_settings()
    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)

    logging.config.dictConfig(build_logging_config(settings))

    if settings.SENTRY_DSN:
        _init_sentry(settings)

    logger = logging.getLogger("complaint_engine")
    logger.info(f"Logging initialized with level: {settings.LOG_LEVEL}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger with context"""
    return logging.getLogger(name)
