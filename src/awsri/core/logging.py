"""Logging configuration for awsri"""

import json
import logging
import logging.handlers
import re
import sys
import time
import traceback
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .exceptions import ConfigurationError

# Chatty third-party loggers kept at WARNING whatever the awsri level is
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 's3transfer')

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with the pricing context passed via ``extra``"""

    EXTRA_FIELDS = ('service', 'region', 'dimension', 'operation', 'duration', 'confidence')

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name)) for name in self.EXTRA_FIELDS if hasattr(record, name)
        )
        if record.exc_info:
            error_type, error, tb = record.exc_info
            entry['exception'] = {
                'type': error_type.__name__,
                'message': str(error),
                'traceback': traceback.format_exception(error_type, error, tb),
            }
        return json.dumps(entry, default=str)


class CredentialRedactingFilter(logging.Filter):
    """Mask AWS credentials that end up in log messages (botocore errors, debug dumps)"""

    PATTERNS = [
        (re.compile(r'\b(AKIA|ASIA)[A-Z0-9]{16}\b'), r'\1****************'),
        (re.compile(r'(aws_secret_access_key|aws_session_token|SecretAccessKey|SessionToken)'
                    r'(["\']?\s*[:=]\s*["\']?)[^"\'\s,}]+', re.IGNORECASE),
         r'\1\2***REDACTED***'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern, replacement in self.PATTERNS:
            redacted = pattern.sub(replacement, redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class PerformanceLogger:
    """Logs how long each AWS API call took"""

    def __init__(self):
        self.logger = logging.getLogger('awsri.performance')

    @contextmanager
    def timer(self, operation: str, **extra):
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self.logger.debug(
                f"{operation} completed in {duration:.3f}s",
                extra={'operation': operation, 'duration': duration, **extra}
            )


_performance_logger = PerformanceLogger()


def get_performance_logger() -> PerformanceLogger:
    return _performance_logger


def _file_handler(log_file: Path, structured: bool) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
    )
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    return handler


def setup_logging(level: str = "WARNING",
                  log_file: Optional[Path] = None,
                  structured: bool = False,
                  console: Optional[Console] = None):
    """Configure the root logger once per invocation.

    Logs always go to stderr so that table and CSV output on stdout stays
    clean. Text mode uses rich; ``structured`` switches both stderr and the
    optional log file to JSON lines.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown logging level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    if structured:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter('%(message)s'))

    handlers = [handler]
    if log_file:
        handlers.append(_file_handler(log_file, structured))

    for item in handlers:
        item.addFilter(CredentialRedactingFilter())
        root_logger.addHandler(item)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
