"""OpenTelemetry logging helpers for flowctx components.

This package provides OTel logger provider configuration, an MDC-aware
logger wrapper and a console log-record exporter.
"""

from .config import (
    configure_logging,
    get_default_logger_provider,
)
from .exporters import (
    LOG_FORMAT,
    ConsoleLogRecordExporter,
)
from .logger import (
    OTelLogger,
    format_log_record,
    format_log_record_json,
)

__all__ = [
    # config
    "configure_logging",
    "get_default_logger_provider",
    # logger
    "OTelLogger",
    "format_log_record",
    "format_log_record_json",
    # exporters
    "ConsoleLogRecordExporter",
    "LOG_FORMAT",
]
