"""Execution accessors and the ambient application lookup.

The workflow engine's execution model is external to :mod:`flowctx`. Anything
exposing the attributes of :class:`ExecutionLike` can be pushed onto a
logging context; :class:`ExecutionSnapshot` is a plain implementation for
callers that do not have an engine object at hand.
"""

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Protocol


class ExecutionLike(Protocol):
    """Read-only view of an execution as consumed by the logging context."""

    @property
    def activity_id(self) -> str | None: ...

    @property
    def process_definition_id(self) -> str | None: ...

    @property
    def process_instance_id(self) -> str | None: ...

    @property
    def tenant_id(self) -> str | None: ...

    @property
    def business_key(self) -> str | None: ...


@dataclass(frozen=True)
class ExecutionSnapshot:
    """Immutable bundle of the contextual fields of one execution."""

    activity_id: str | None = None
    process_definition_id: str | None = None
    process_instance_id: str | None = None
    tenant_id: str | None = None
    business_key: str | None = None

    def child(self, **overrides: str | None) -> "ExecutionSnapshot":
        """Derive an execution inheriting the unspecified fields."""
        return ExecutionSnapshot(
            activity_id=overrides.get("activity_id", self.activity_id),
            process_definition_id=overrides.get(
                "process_definition_id", self.process_definition_id
            ),
            process_instance_id=overrides.get(
                "process_instance_id", self.process_instance_id
            ),
            tenant_id=overrides.get("tenant_id", self.tenant_id),
            business_key=overrides.get("business_key", self.business_key),
        )


# =============================================================================
# Ambient Application
# =============================================================================


ApplicationResolver = Callable[[], str | None]
"""Returns the name of the currently active owning application, if any."""

_current_application: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "flowctx_current_application", default=None
)


def current_application_name() -> str | None:
    """Return the application active in the current context, or ``None``."""
    return _current_application.get()


@contextmanager
def application_scope(name: str | None) -> Iterator[None]:
    """Make ``name`` the current application for the duration of the block.

    Example:
        >>> with application_scope("invoice-app"):
        ...     projection.push_section(execution)  # tags applicationName
    """
    token = _current_application.set(name)
    try:
        yield
    finally:
        _current_application.reset(token)
