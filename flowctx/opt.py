"""Rx operators that run downstream processing inside a logging context."""

from typing import Any, Callable

from reactivex import Observable

from .execution import ExecutionLike
from .projection import LoggingProjection


def within_logging_section(
    projection: LoggingProjection,
    select_execution: Callable[[Any], ExecutionLike] = lambda x: x,
):
    """
    The operator forwards every item while a logging section for it is open.

    For each item the execution chosen by ``select_execution`` is pushed onto
    ``projection`` before the item is forwarded and popped right after, so
    log records emitted by downstream observers during ``on_next`` carry the
    item's contextual data. Errors raised downstream are reported via
    ``on_error`` once the section has been popped.
    """

    def _within_logging_section(source):
        def subscribe(observer, scheduler=None):

            def on_next(value: Any) -> None:
                try:
                    execution = select_execution(value)
                except Exception as e:
                    observer.on_error(e)
                    return

                try:
                    with projection.section(execution):
                        observer.on_next(value)
                except Exception as e:
                    observer.on_error(e)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _within_logging_section
