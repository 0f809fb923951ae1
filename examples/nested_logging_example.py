import reactivex as rx

from flowctx import (
    MDC,
    ExecutionSnapshot,
    LoggingContextConfig,
    LoggingProjection,
    application_scope,
    within_logging_section,
)
from flowctx.telemetry import OTelLogger, get_default_logger_provider

# this example shows how nested sections tag log records with the innermost execution's data.

logger = OTelLogger(
    get_default_logger_provider("flowctx-example").get_logger("example"),
    source="Example",
    mdc=MDC,
)


def nested():
    projection = LoggingProjection(LoggingContextConfig(business_key="businessKey"))
    process = ExecutionSnapshot(
        activity_id="start",
        process_definition_id="invoice:1",
        process_instance_id="pi-1",
        business_key="order-42",
    )

    with application_scope("invoice-app"):
        with projection.section(process):
            logger.info("process started")

            with projection.section(process.child(activity_id="approve")):
                logger.info("approving invoice")

                with projection.section(process.child(activity_id="notify", process_instance_id="pi-2")):
                    logger.info("called sub process")

                logger.info("back in approve")

            logger.info("process ended")

    logger.info("outside any section")


def stream():
    projection = LoggingProjection(LoggingContextConfig())
    rx.from_(["receive", "check", "ship"]).pipe(
        within_logging_section(
            projection,
            lambda activity: ExecutionSnapshot(activity_id=activity, process_instance_id="pi-7"),
        )
    ).subscribe(lambda activity: logger.info(f"handling {activity}"))


if __name__ == "__main__":
    nested()
    stream()
