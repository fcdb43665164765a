"""
Logging Configuration

Provides:
- CustomJsonFormatter: one JSON object per line, tagged with the invocation's request id
- setup_logging: dictConfig from a YAML file with ${VAR} substitution
- flush_handlers: flush root handlers before the execution environment freezes
"""

import json
import logging
import logging.config
import os
import string
from datetime import datetime, timezone
from typing import Optional

import yaml

from .request_context import get_function_name, get_request_id

# LogRecord attributes that are never copied into the JSON payload.
_STANDARD_ATTRS = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


class CustomJsonFormatter(logging.Formatter):
    """
    JSON Formatter for CloudWatch-style log ingestion.

    Fields:
      - _time: ISO8601 timestamp (millisecond precision)
      - level: Log level
      - logger: Logger name (e.g. lambda_pipeline.pipeline)
      - message: Log message
      - aws_request_id: Request id of the current invocation
      - function_name: Name of the executing function
    """

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "aws_request_id", None) or get_request_id()
        function_name = getattr(record, "function_name", None) or get_function_name()

        log_data = {
            "_time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id:
            log_data["aws_request_id"] = request_id
        if function_name:
            log_data["function_name"] = function_name

        # Include extra fields
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_") and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(config_path: Optional[str] = None, log_level: Optional[str] = None):
    """
    Load the YAML config, substitute environment variables, and initialize logging.
    """
    if config_path is None:
        from .config import PipelineSettings

        settings = PipelineSettings()
        config_path = settings.LOGGING_CONFIG_PATH
        log_level = log_level or settings.LOG_LEVEL

    if not os.path.exists(config_path):
        logging.basicConfig(level=log_level or logging.INFO)
        return

    with open(config_path, "r", encoding="utf-8") as f:
        # Supports ${LOG_LEVEL} format.
        template = string.Template(f.read())

        mapping = os.environ.copy()
        if log_level:
            mapping["LOG_LEVEL"] = log_level
        elif "LOG_LEVEL" not in mapping:
            mapping["LOG_LEVEL"] = "INFO"

        content = template.safe_substitute(mapping)
        config = yaml.safe_load(content)
        logging.config.dictConfig(config)


def flush_handlers(logger: Optional[logging.Logger] = None) -> None:
    """Flush every handler on the given logger (root by default)."""
    logger = logger or logging.getLogger()
    for handler in logger.handlers:
        handler.flush()


_logging_configured = False


def configure_logging_once() -> bool:
    """
    Run setup_logging() the first time it is called in this process.

    Returns:
        True if logging was configured by this call
    """
    global _logging_configured
    if _logging_configured:
        return False
    _logging_configured = True
    setup_logging()
    return True
