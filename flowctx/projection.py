"""Logging context that projects nested execution data into the MDC.

:class:`LoggingProjection` is a :class:`~flowctx.property_stack.PropertyStack`
bound to the MDC keys of a :class:`~flowctx.config.LoggingContextConfig`.
Every value change is written to the diagnostic store right away and every
popped section restores the store to the values of the innermost section
still open, so log records emitted during a nested unit of work carry that
unit's activity id, process ids, tenant id, business key and application
name.

A projection whose roles are all disabled never touches the store.
"""

from contextlib import contextmanager
from typing import Iterator

from .config import ContextRole, LoggingContextConfig
from .execution import ApplicationResolver, ExecutionLike, current_application_name
from .mdc import MDC, DiagnosticStore
from .property_stack import PropertyStack, noop_push_hook
from .telemetry.logger import OTelLogger


class LoggingProjection(PropertyStack):
    """
    Property stack synchronised with a diagnostic store.

    Parameters
    - config: LoggingContextConfig
        MDC key per role. Blank keys disable the role for the lifetime of
        this instance.
    - store: DiagnosticStore, default :data:`~flowctx.mdc.MDC`
        The thread-local store written on every push and pop.
    - application_resolver: ApplicationResolver
        Returns the currently active application name, if any.
    - logger: Optional[OTelLogger]
        Receives DEBUG records about section changes.

    Example:
        >>> projection = LoggingProjection(LoggingContextConfig())
        >>> with projection.section(execution):
        ...     logger.info("Running")  # MDC holds activityId, processInstanceId, ...
    """

    def __init__(
        self,
        config: LoggingContextConfig,
        store: DiagnosticStore = MDC,
        application_resolver: ApplicationResolver = current_application_name,
        logger: OTelLogger | None = None,
    ):
        super().__init__(on_push=self._update_store, on_remove=self._update_store)
        self._store = store
        self._application_resolver = application_resolver
        self._logger = logger

        self._names: dict[ContextRole, str] = {
            role: name
            for role in ContextRole
            if (name := config.name_for(role)) is not None
        }
        self.property_names: tuple[str, ...] = tuple(self._names.values())

    @property
    def is_enabled(self) -> bool:
        return bool(self.property_names)

    def name_for(self, role: ContextRole) -> str | None:
        return self._names.get(role)

    def push_section(self, execution: ExecutionLike) -> bool:  # type: ignore[override]
        """
        Start a new section holding the execution's contextual values.

        The first section pushed on this instance clears the active keys from
        the store, so only this context's values remain visible there.

        Args:
            execution: The execution to read the contextual values from.

        Returns:
            ``True`` if any value changed; the section must then be popped
            with :meth:`pop_section`.
        """
        if not self.is_enabled:
            return False
        if not self.has_tracked_values:
            self.clear_external_context()

        names = self._names
        values: list[tuple[str, str | None]] = [
            (names.get(ContextRole.ACTIVITY_ID, ""), execution.activity_id),
            (
                names.get(ContextRole.PROCESS_DEFINITION_ID, ""),
                execution.process_definition_id,
            ),
            (
                names.get(ContextRole.PROCESS_INSTANCE_ID, ""),
                execution.process_instance_id,
            ),
            (names.get(ContextRole.TENANT_ID, ""), execution.tenant_id),
        ]
        if ContextRole.APPLICATION_NAME in names:
            application = self._application_resolver()
            if application is not None:
                values.append((names[ContextRole.APPLICATION_NAME], application))
        if ContextRole.BUSINESS_KEY in names:
            values.append((names[ContextRole.BUSINESS_KEY], execution.business_key))

        changed = self._push_values(values, self._on_push)
        if changed:
            self._log("Logging context section pushed", sections=self.section_count)
        return changed

    def pop_section(self) -> None:
        """Pop the latest section and restore the store to the values now current."""
        if not self.is_enabled:
            return
        had_section = self.section_count > 0
        super().pop_section()
        if had_section:
            self._log("Logging context section popped", sections=self.section_count)

    @contextmanager
    def section(self, execution: ExecutionLike) -> Iterator[bool]:
        """Push a section for the ``with`` block and pop it on exit.

        Yields whether the section changed anything.
        """
        changed = self.push_section(execution)
        try:
            yield changed
        finally:
            if changed:
                self.pop_section()

    def clear_external_context(self) -> None:
        """Remove every active property from the store."""
        for name in self.property_names:
            self._store.remove(name)
        if self.property_names:
            self._log("Logging context cleared from MDC")

    def sync_all(self) -> None:
        """Write the current values of this context to the store.

        Does nothing unless this context has tracked a value, so a context
        that never pushed anything leaves the store alone.
        """
        if not self.has_tracked_values:
            return
        for name in self.property_names:
            self._update_store(self, name, self.get_latest_property_value(name))

    def fetch_current_context(self) -> bool:
        """
        Preserve the store's current values in a new section.

        Used when a nested engine invocation starts inside this thread: the
        values it finds in the store are remembered without rewriting them,
        so popping the section later restores exactly that state.

        Returns:
            ``True`` if a section was created and must be popped later.
        """
        if not self.is_enabled:
            return False
        changed = self._push_values(
            [(name, self._store.get(name)) for name in self.property_names],
            noop_push_hook,
        )
        if changed:
            self._log("Logging context fetched from MDC", sections=self.section_count)
        return changed

    # ------------------------------------------------------------------

    def _update_store(
        self, stack: PropertyStack, property: str, value: str | None
    ) -> None:
        if value is None:
            self._store.remove(property)
        else:
            self._store.put(property, value)

    def _log(self, message: str, **attrs) -> None:
        if self._logger is None:
            return
        self._logger.debug(message, **attrs)
