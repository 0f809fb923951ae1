"""Convenience exports for the :mod:`flowctx` package."""

from .config import ContextRole, LoggingContextConfig  # noqa: F401
from .execution import (  # noqa: F401
    ApplicationResolver,
    ExecutionLike,
    ExecutionSnapshot,
    application_scope,
    current_application_name,
)
from .mdc import MDC, ContextVarDiagnosticStore, DiagnosticStore  # noqa: F401
from .opt import within_logging_section  # noqa: F401
from .projection import LoggingProjection  # noqa: F401
from .property_stack import (  # noqa: F401
    PROPERTY_ACTIVITY_ID,
    ExecutionDataStack,
    PropertyStack,
    PushHook,
    RemoveHook,
    noop_push_hook,
    noop_remove_hook,
)
from .values import EXPLICIT_NULL  # noqa: F401

__all__ = [
    "EXPLICIT_NULL",

    # stacks
    "PropertyStack",
    "PushHook",
    "RemoveHook",
    "noop_push_hook",
    "noop_remove_hook",
    "ExecutionDataStack",
    "PROPERTY_ACTIVITY_ID",

    # logging context
    "ContextRole",
    "LoggingContextConfig",
    "LoggingProjection",
    "within_logging_section",

    # execution model
    "ExecutionLike",
    "ExecutionSnapshot",
    "ApplicationResolver",
    "current_application_name",
    "application_scope",

    # diagnostic store
    "DiagnosticStore",
    "ContextVarDiagnosticStore",
    "MDC",
]
