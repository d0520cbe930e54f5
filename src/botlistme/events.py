"""
Listener registration and dispatch.

BotlistMe and WebhookServer report what happens in the background
(stats posted, autopost failures, incoming votes) through named events.
Callers register callbacks explicitly, much like discord.py's
``add_listener``.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Set

from botlistme.utils.logging import log_error


Listener = Callable[..., Any]


class EventDispatcher:
    """
    Mixin holding named listeners.

    Plain functions are called inline; coroutine functions are scheduled
    as tasks on the running loop. A listener that raises is logged and
    does not stop the others.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}
        self._listener_tasks: Set[asyncio.Task] = set()

    def add_listener(self, event: str, callback: Listener) -> None:
        """
        Register ``callback`` for ``event``.

        Example:
            ```python
            client.add_listener("error", lambda exc: print("autopost failed", exc))
            ```
        """
        if not callable(callback):
            raise TypeError("Listener must be callable")
        self._listeners.setdefault(event, []).append(callback)

    def remove_listener(self, event: str, callback: Listener) -> None:
        """Unregister ``callback``; unknown callbacks are ignored."""
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def listen(self, event: str) -> Callable[[Listener], Listener]:
        """
        Decorator form of :meth:`add_listener`.

        Example:
            ```python
            @client.listen("posted")
            async def on_posted():
                print("Stats posted")
            ```
        """
        def decorator(callback: Listener) -> Listener:
            self.add_listener(event, callback)
            return callback
        return decorator

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    def dispatch(self, event: str, *args: Any) -> None:
        """Call every listener registered for ``event`` with ``args``."""
        for callback in list(self._listeners.get(event, [])):
            try:
                if inspect.iscoroutinefunction(callback):
                    task = asyncio.get_running_loop().create_task(
                        self._run_listener(event, callback, *args)
                    )
                    self._listener_tasks.add(task)
                    task.add_done_callback(self._listener_tasks.discard)
                else:
                    callback(*args)
            except Exception as e:
                log_error(e, {"event_name": event, "listener": getattr(callback, "__name__", repr(callback))})

    async def _run_listener(self, event: str, callback: Listener, *args: Any) -> None:
        try:
            await callback(*args)
        except Exception as e:
            log_error(e, {"event_name": event, "listener": getattr(callback, "__name__", repr(callback))})

    async def wait_for_listeners(self) -> None:
        """Wait until every scheduled coroutine listener has finished."""
        if self._listener_tasks:
            await asyncio.gather(*self._listener_tasks, return_exceptions=True)
