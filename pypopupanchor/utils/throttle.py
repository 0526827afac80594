import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

from .helpers import monotonic_millis

logger = logging.getLogger(__name__)

class Throttle:
    """
    Limits how often `callback` runs.

    A call made at least `delay_ms` after the previous run executes at once.
    Calls arriving sooner collapse into one trailing run, scheduled for when
    the delay has elapsed and using the most recent arguments.
    Coroutine callbacks are scheduled as tasks on the running loop.
    """

    def __init__(self, callback: Callable[..., Any], delay_ms: float, clock: Callable[[], float] = monotonic_millis):
        if delay_ms < 0:
            raise ValueError("Throttle delay must not be negative")
        self._callback = callback
        self._delay_ms = delay_ms
        self._clock = clock
        self._last_call: Optional[float] = None
        self._last_args: tuple = ()
        self._last_kwargs: dict = {}
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def delay_ms(self) -> float:
        return self._delay_ms

    @property
    def pending(self) -> bool:
        """True while a trailing run is scheduled."""
        return self._timer is not None

    def __call__(self, *args, **kwargs) -> None:
        self._last_args, self._last_kwargs = args, kwargs
        now = self._clock()
        since = None if self._last_call is None else now - self._last_call

        if since is None or since >= self._delay_ms:
            self._cancel_timer()
            self._last_call = now
            self._invoke(args, kwargs)
            return

        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later((self._delay_ms - since) / 1000.0, self._fire_trailing)

    def cancel(self) -> None:
        """Drops a scheduled trailing run. Tasks already started keep running."""
        self._cancel_timer()

    async def drain(self) -> None:
        """Waits for callback tasks started by this throttle."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire_trailing(self) -> None:
        self._timer = None
        self._last_call = self._clock()
        self._invoke(self._last_args, self._last_kwargs)

    def _invoke(self, args: tuple, kwargs: dict) -> None:
        try:
            result = self._callback(*args, **kwargs)
        except Exception as e:
            logger.error(f"Throttled callback {getattr(self._callback, '__name__', self._callback)!r} failed: {e}")
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Throttled coroutine failed: {task.exception()}")
