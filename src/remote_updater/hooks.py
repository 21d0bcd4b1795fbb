"""Host hook registration interface.

The updater never assumes how the host dispatches its hooks; it only
needs something with a :meth:`HookRegistry.register` method.
:class:`FilterRegistry` is a small in-memory implementation with
filter semantics: every handler receives the current value plus the
event arguments and returns the (possibly replaced) value.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from remote_updater._constants import DEFAULT_PRIORITY

_logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class HookRegistry(Protocol):
    """Structural interface for the host's hook registry."""

    def register(self, event: str, handler: Handler, *, priority: int = DEFAULT_PRIORITY) -> None:
        ...


@dataclass(slots=True)
class _Registration:
    handler: Handler
    priority: int
    order: int


@dataclass
class FilterRegistry:
    """In-memory filter registry.

    Registering the same handler for the same event and priority twice
    is a no-op. Handlers run in ascending priority, then registration
    order. Coroutine results are awaited.
    """

    _hooks: dict[str, list[_Registration]] = field(default_factory=dict)
    _counter: int = 0

    def register(self, event: str, handler: Handler, *, priority: int = DEFAULT_PRIORITY) -> None:
        registrations = self._hooks.setdefault(event, [])
        for existing in registrations:
            if existing.handler == handler and existing.priority == priority:
                return
        self._counter += 1
        registrations.append(_Registration(handler, priority, self._counter))
        registrations.sort(key=lambda r: (r.priority, r.order))

    def handlers(self, event: str) -> list[Handler]:
        return [r.handler for r in self._hooks.get(event, [])]

    async def apply(self, event: str, value: Any, *args: Any) -> Any:
        """Pass *value* through every handler registered for *event*."""
        for handler in self.handlers(event):
            result = handler(value, *args)
            if inspect.isawaitable(result):
                result = await result
            value = result
        _logger.debug("Applied %d handler(s) for %s", len(self.handlers(event)), event)
        return value
