"""Parser - base class for once-only asynchronous processing.

A Parser wraps one piece of input data and turns it into a result. The
processing runs at most once; every call to process() hands out the same
asyncio task, so callers can await it as often as they like.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Generic, TypeVar

from qwxml.exceptions import HookNotImplementedError

log = logging.getLogger(__name__)

D = TypeVar("D")
R = TypeVar("R")


class Parser(Generic[D, R]):
    """Base class for all compilers.

    Subclasses implement `_process()`, which may return the result directly
    or an awaitable producing it. Errors raised by `_process()`, synchronously
    or not, surface only through the task returned by `process()`.
    """

    def __init__(self, data: D):
        """Initialize the parser with the data to parse.

        Args:
            data: The input this parser turns into a result.
        """
        self.parent: Parser[Any, Any] | None = None
        self._data = data
        self._result: R | None = None
        self._task: asyncio.Task[Parser[D, R]] | None = None

    @property
    def data(self) -> D:
        return self._data

    @property
    def result(self) -> R | None:
        """The result of the processing.

        Reading it before processing has settled is allowed but logged, and
        yields None.
        """
        if not self.settled:
            log.warning("%r has not processed its data yet", self)
        return self._result

    @property
    def processed(self) -> bool:
        """True once process() has been called."""
        return self._task is not None

    @property
    def settled(self) -> bool:
        """True once processing has finished, successfully or not."""
        return self._task is not None and self._task.done()

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def error(self) -> BaseException | None:
        """The exception that failed processing, if any."""
        if not self.settled or self._task.cancelled():  # type: ignore[union-attr]
            return None
        return self._task.exception()  # type: ignore[union-attr]

    def process(self) -> asyncio.Task[Parser[D, R]]:
        """Start processing, once.

        Must be called while an event loop is running. Repeated calls return
        the same task, which resolves to this parser.

        Returns:
            The task processing this parser's data.
        """
        if self._task is None:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run())
        return self._task

    async def _run(self) -> Parser[D, R]:
        result = self._process()
        if inspect.isawaitable(result):
            result = await result
        self._result = result
        return self

    def _process(self) -> Any:
        """Internal parse process. Returns R or an awaitable of R."""
        raise HookNotImplementedError("Parser", "_process")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"
