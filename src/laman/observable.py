"""Change notification for engine state.

Engines publish plain attributes and call ``_changed()`` after every mutation.
A presentation layer either subscribes to callbacks or polls ``version`` and
reads ``snapshot()``.
"""

from __future__ import annotations

from typing import Any, Callable

Listener = Callable[["Observable"], None]


class Observable:
    """Base class for engines with published state."""

    # Attribute names included in snapshot(); set by subclasses
    published: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self.version = 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the engine after each change.

        Returns:
            A callable that removes the listener. Calling it twice is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> dict[str, Any]:
        """Return the published fields as a dict, lists copied."""
        result: dict[str, Any] = {}
        for name in self.published:
            value = getattr(self, name)
            result[name] = list(value) if isinstance(value, list) else value
        return result

    def _changed(self) -> None:
        self.version += 1
        for listener in list(self._listeners):
            listener(self)
