"""Section-based property stacks.

A :class:`PropertyStack` records, for every property name, a stack of values
pushed as execution enters nested scopes. Values pushed by one
:meth:`PropertyStack.push_section` call form a *section*; popping the section
restores the values that were current before it was pushed.

Only properties whose value actually changes get a new frame, and a section
is only created when at least one property changed::

    stack = PropertyStack()
    stack.push_section({"activityId": "task1"})   # True
    stack.push_section({"activityId": "task1"})   # False, nothing to pop
    stack.get_latest_property_value("activityId")  # "task1"
    stack.pop_section()
    stack.get_latest_property_value("activityId")  # None

Observers can mirror changes elsewhere through the ``on_push`` and
``on_remove`` hooks.
"""

from collections.abc import Iterable, Mapping
from typing import Callable

from .execution import ExecutionLike
from .values import Frame, from_frame, is_not_blank, to_frame, values_equal

PushHook = Callable[["PropertyStack", str, str | None], None]
"""Called after a value was pushed: ``hook(stack, property, value)``."""

RemoveHook = Callable[["PropertyStack", str, str | None], None]
"""Called after a frame was popped: ``hook(stack, property, current_value)``."""


def noop_push_hook(stack: "PropertyStack", property: str, value: str | None) -> None:
    pass


def noop_remove_hook(stack: "PropertyStack", property: str, value: str | None) -> None:
    pass


class PropertyStack:
    """
    Multi-property stack of sections.

    Parameters
    - on_push: Optional[PushHook]
        Invoked synchronously for every value that gets a new frame.
    - on_remove: Optional[RemoveHook]
        Invoked synchronously after every frame removal, with the value that
        is current once the frame is gone.

    Not thread-safe. An instance belongs to one unit of work and callers must
    pop sections in the reverse order they were pushed.
    """

    def __init__(
        self,
        on_push: PushHook | None = None,
        on_remove: RemoveHook | None = None,
    ):
        self._on_push: PushHook = on_push or noop_push_hook
        self._on_remove: RemoveHook = on_remove or noop_remove_hook
        self._property_values: dict[str, list[Frame]] = {}
        self._sections: list[list[str]] = []

    def push_section(
        self,
        values: Mapping[str, str | None] | Iterable[tuple[str, str | None]],
    ) -> bool:
        """
        Start a new section with the given property values.

        Args:
            values: Mapping or ``(property, value)`` pairs to consider.

        Returns:
            ``True`` if any property changed. Only then does the caller have
            to call :meth:`pop_section` later.
        """
        return self._push_values(values, self._on_push)

    def pop_section(self) -> None:
        """Pop the latest section and restore the values it replaced."""
        if not self._sections:
            return
        section = self._sections.pop()
        for property in section:
            self._remove_from_stack(property)

    def get_latest_property_value(self, property: str) -> str | None:
        """Return the current value of ``property``; ``None`` if unset or null."""
        frames = self._property_values.get(property)
        if not frames:
            return None
        return from_frame(frames[-1])

    @property
    def section_count(self) -> int:
        return len(self._sections)

    @property
    def has_tracked_values(self) -> bool:
        """Whether any value was ever pushed onto this stack."""
        return bool(self._property_values)

    def tracked_properties(self) -> list[str]:
        return list(self._property_values)

    def depth(self, property: str) -> int:
        return len(self._property_values.get(property, ()))

    # ------------------------------------------------------------------

    def _push_values(
        self,
        values: Mapping[str, str | None] | Iterable[tuple[str, str | None]],
        hook: PushHook,
    ) -> bool:
        pairs = values.items() if isinstance(values, Mapping) else values
        section: list[str] | None = None
        for property, value in pairs:
            if not is_not_blank(property):
                continue
            frames = self._property_values.get(property)
            current = frames[-1] if frames else None
            if values_equal(current, value):
                continue

            # materialize the section on its first change only
            if section is None:
                section = []
                self._sections.append(section)
            section.append(property)

            if frames is None:
                frames = self._property_values[property] = []
            frames.append(to_frame(value))
            hook(self, property, value)
        return section is not None

    def _remove_from_stack(self, property: str) -> None:
        frames = self._property_values.get(property)
        if frames:
            frames.pop()
        self._on_remove(self, property, self.get_latest_property_value(property))


PROPERTY_ACTIVITY_ID = "activityId"


class ExecutionDataStack(PropertyStack):
    """Tracks the activity id of nested executions, independent of logging."""

    def push_execution(self, execution: ExecutionLike) -> bool:
        return self.push_section({PROPERTY_ACTIVITY_ID: execution.activity_id})

    @property
    def latest_activity_id(self) -> str | None:
        return self.get_latest_property_value(PROPERTY_ACTIVITY_ID)
