"""MDC-aware OTel logger wrapper and log-record formatting.

Provides :class:`OTelLogger` — a thin wrapper around the OTel Logger API
with convenience ``info``/``debug``/``warning``/``error`` methods that tags
every record with the entries of a diagnostic store.

Also contains :func:`format_log_record` and :func:`format_log_record_json`
helper functions used by log-record exporters.
"""

import json
import time
from datetime import UTC, datetime

from opentelemetry._logs import LogRecord, SeverityNumber

from ..mdc import ContextVarDiagnosticStore

# attributes rendered elsewhere in the text line
_RESERVED_ATTRIBUTES = ("log.source", "service.name")


# =============================================================================
# Log Record Formatting
# =============================================================================


def format_log_record(record: LogRecord) -> str:
    """
    Format a LogRecord as a human-readable string for console output.

    Format: YYYY-MM-DDTHH:MM:SSZ [LEVEL] source {k=v, ...}\\t: body\\n

    Diagnostic context attributes are listed in braces, sorted by key.

    Args:
        record: OpenTelemetry LogRecord to format.

    Returns:
        Formatted string suitable for console output.
    """
    timestamp_ns = record.timestamp or 0
    timestamp_str = datetime.fromtimestamp(timestamp_ns / 1e9, tz=UTC).strftime(
        "%Y-%m-%dT%H:%M:%SZ"
    )
    attrs = record.attributes or {}
    source = attrs.get("log.source", "Unknown")

    context = ", ".join(
        f"{key}={attrs[key]}"
        for key in sorted(attrs)
        if key not in _RESERVED_ATTRIBUTES
    )
    context_part = f" {{{context}}}" if context else ""

    return (
        f"{timestamp_str} [{record.severity_text}] "
        f"{source}{context_part}\t: {record.body!r}\n"
    )


def format_log_record_json(record: LogRecord) -> str:
    """
    Format a LogRecord as a JSON line for structured output.

    Args:
        record: OpenTelemetry LogRecord to format.

    Returns:
        JSON string (single line) with newline terminator.
    """
    timestamp_ns = record.timestamp or 0

    data = {
        "timestamp": datetime.fromtimestamp(timestamp_ns / 1e9, tz=UTC).isoformat(),
        "timestamp_ns": timestamp_ns,
        "severity_text": record.severity_text,
        "severity_number": record.severity_number.value
        if record.severity_number
        else None,
        "body": record.body,
        "attributes": dict(record.attributes) if record.attributes else {},
    }
    return json.dumps(data, default=str) + "\n"


# =============================================================================
# OTel Logger Wrapper
# =============================================================================


class OTelLogger:
    """Thin wrapper for OTel Logger with convenient emit methods.

    Records carry the ``log.source`` attribute, the current entries of the
    optional diagnostic store and any static attributes bound with
    :meth:`with_attributes`. Explicit keyword attributes win over both.

    Example:
        >>> logger = OTelLogger(provider.get_logger("engine"), source="Job", mdc=MDC)
        >>> with projection.section(execution):
        ...     logger.info("Executing")  # tagged with activityId etc.
    """

    def __init__(
        self,
        logger,
        source: str,
        mdc: ContextVarDiagnosticStore | None = None,
        attributes: dict[str, str | int] | None = None,
        min_severity: SeverityNumber | None = None,
    ):
        """Initialize OTel logger wrapper.

        Args:
            logger: OTel Logger instance from LoggerProvider.get_logger()
            source: Source identifier for log.source attribute
            mdc: Optional diagnostic store whose entries tag every record.
            attributes: Optional static attributes for every record.
            min_severity: Optional minimum severity -- records below this
                level are silently dropped.
        """
        self._logger = logger
        self._source = source
        self._mdc = mdc
        self._attributes = dict(attributes or {})
        self._min_severity = min_severity

    def info(self, message: str, **attrs) -> None:
        """Emit INFO level log."""
        self._emit(SeverityNumber.INFO, "INFO", message, attrs)

    def debug(self, message: str, **attrs) -> None:
        """Emit DEBUG level log."""
        self._emit(SeverityNumber.DEBUG, "DEBUG", message, attrs)

    def warning(self, message: str, **attrs) -> None:
        """Emit WARN level log."""
        self._emit(SeverityNumber.WARN, "WARN", message, attrs)

    def error(self, message: str, **attrs) -> None:
        """Emit ERROR level log."""
        self._emit(SeverityNumber.ERROR, "ERROR", message, attrs)

    def with_attributes(self, **attrs) -> "OTelLogger":
        """Derive a child logger with additional static attributes.

        A ``source`` key is popped and used as the child's source string.
        """
        new_source = attrs.pop("source", self._source)
        return OTelLogger(
            self._logger,
            source=new_source,
            mdc=self._mdc,
            attributes={**self._attributes, **attrs},
            min_severity=self._min_severity,
        )

    def _emit(
        self,
        severity_number: SeverityNumber,
        severity_text: str,
        message: str,
        attrs: dict,
    ) -> None:
        if self._min_severity and severity_number.value < self._min_severity.value:
            return
        merged = {
            "log.source": self._source,
            **(self._mdc.snapshot() if self._mdc is not None else {}),
            **self._attributes,
            **attrs,
        }
        record = LogRecord(
            timestamp=time.time_ns(),
            body=message,
            severity_text=severity_text,
            severity_number=severity_number,
            attributes=merged,
        )
        self._logger.emit(record)
