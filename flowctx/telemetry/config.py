"""OTel logger provider configuration for flowctx components.

Provides :func:`configure_logging` (logger provider) and
:func:`get_default_logger_provider` (lazy singleton with console output).
"""

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    LogRecordExporter,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource

from .exporters import ConsoleLogRecordExporter


def configure_logging(
    service_name: str = "flowctx",
    service_version: str = "",
    log_exporter: LogRecordExporter | None = None,
    batch_logs: bool = True,
) -> LoggerProvider:
    """
    Configure an OTel LoggerProvider for flowctx components.

    Returns the provider for explicit injection into components -- does NOT
    set the global provider.

    Args:
        service_name: Service identifier for resource attributes.
        service_version: Service version for resource attributes.
        log_exporter: Optional log exporter
            (e.g., OTLPLogExporter, ConsoleLogRecordExporter).
        batch_logs: If True, use BatchLogRecordProcessor
            (better for network exporters). If False, use
            SimpleLogRecordProcessor (immediate, better for console).

    Returns:
        The configured LoggerProvider.

    Example:
        >>> provider = configure_logging(
        ...     service_name="order-engine",
        ...     log_exporter=ConsoleLogRecordExporter(),
        ...     batch_logs=False,
        ... )
        >>> logger = OTelLogger(provider.get_logger("engine"), source="Engine", mdc=MDC)
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": service_version,
        }
    )

    logger_provider = LoggerProvider(resource=resource)
    if log_exporter:
        if batch_logs:
            logger_provider.add_log_record_processor(
                BatchLogRecordProcessor(log_exporter)
            )
        else:
            logger_provider.add_log_record_processor(
                SimpleLogRecordProcessor(log_exporter)
            )

    return logger_provider


_default_logger_provider: LoggerProvider | None = None


def get_default_logger_provider(service_name: str = "flowctx") -> LoggerProvider:
    """Get or create the default provider with console output.

    Lazily initializes on first call and returns the same provider on
    subsequent calls. Output goes to stderr with immediate (non-batched)
    processing.

    Args:
        service_name: Service name for the default provider (only used on first call).
    """
    global _default_logger_provider

    if _default_logger_provider is None:
        _default_logger_provider = configure_logging(
            service_name=service_name,
            log_exporter=ConsoleLogRecordExporter(),
            batch_logs=False,
        )
    return _default_logger_provider
