"""Thread-local diagnostic context (MDC) consumed by the logging backend.

:class:`DiagnosticStore` is the only contract the logging context relies on.
:class:`ContextVarDiagnosticStore` keeps its entries in a
:class:`contextvars.ContextVar`, so every thread, and every asyncio task
context, sees its own entries. Updates replace the stored dict instead of
mutating it, which keeps copied contexts independent of each other.
"""

import contextvars
from typing import Protocol


class DiagnosticStore(Protocol):
    """Simple key/value facility tagged onto log records."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class ContextVarDiagnosticStore:
    """:class:`DiagnosticStore` backed by a ``ContextVar`` holding a dict."""

    def __init__(self, name: str = "flowctx_mdc"):
        self._var: contextvars.ContextVar[dict[str, str]] = contextvars.ContextVar(
            name
        )

    def _entries(self) -> dict[str, str]:
        try:
            return self._var.get()
        except LookupError:
            entries: dict[str, str] = {}
            self._var.set(entries)
            return entries

    def get(self, key: str) -> str | None:
        return self._entries().get(key)

    def put(self, key: str, value: str) -> None:
        entries = self._entries().copy()
        entries[key] = value
        self._var.set(entries)

    def remove(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        entries = self._entries()
        if key not in entries:
            return
        entries = entries.copy()
        del entries[key]
        self._var.set(entries)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of all entries visible in the current context."""
        return self._entries().copy()

    def clear(self) -> None:
        self._var.set({})


MDC = ContextVarDiagnosticStore()
"""Process-wide default store; entries are still per thread."""
