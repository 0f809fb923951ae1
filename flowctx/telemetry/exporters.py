"""OTel log-record exporter for console output."""

import sys
from collections.abc import Sequence
from typing import Literal

from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)

from .logger import format_log_record, format_log_record_json

LOG_FORMAT = Literal["text", "json"]


class ConsoleLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that writes CLI-friendly output to stderr.

    Unlike OTel's ConsoleLogExporter which outputs verbose JSON,
    this exporter produces one line per record, with the diagnostic context
    in braces:

        2026-02-03T10:30:00Z [INFO] JobExecutor {activityId=task1}\t: 'Executing'

    Parameters:
        format: "text" for the line above, "json" for one JSON object per line.
    """

    def __init__(self, format: LOG_FORMAT = "text"):
        if format not in ("text", "json"):
            raise ValueError(f"Invalid format: {format}. Choose from 'text' or 'json'.")
        self._formatter = format_log_record if format == "text" else format_log_record_json

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """Export log records to stderr.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success.
        """
        try:
            for readable_record in batch:
                record = readable_record.log_record
                sys.stderr.write(self._formatter(record))
            sys.stderr.flush()
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """Shutdown the exporter (no-op for console)."""
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        sys.stderr.flush()
        return True
