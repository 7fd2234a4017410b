"""Resolver - single-settlement completion primitive.

A Resolver owns an asyncio future and is the only thing allowed to settle
it. It may be resolved or rejected exactly once; any further completion is
a programmer error.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Generic, TypeVar

from qwxml.exceptions import ProtocolViolationError, QwxmlError

R = TypeVar("R")


class ResolverState(str, Enum):
    """Settlement state of a resolver."""

    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Resolver(Generic[R]):
    """Holds a future that settles exactly once.

    Usage:
        resolver = Resolver()
        loop.call_soon(resolver.resolve, 42)
        value = await resolver.future
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """Create a pending resolver.

        Args:
            loop: Event loop that owns the future. Defaults to the running loop.
        """
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future[R] = self._loop.create_future()
        self._state = ResolverState.PENDING
        self._value: Any = None

    @property
    def future(self) -> asyncio.Future[R]:
        return self._future

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state is ResolverState.PENDING

    @property
    def resolved(self) -> bool:
        return self._state is ResolverState.RESOLVED

    @property
    def rejected(self) -> bool:
        return self._state is ResolverState.REJECTED

    @property
    def complete(self) -> bool:
        """True once the resolver has been resolved or rejected."""
        return self._state is not ResolverState.PENDING

    @property
    def value(self) -> Any:
        """The result or rejection reason, None while pending."""
        return self._value

    def resolve(self, result: R | None = None) -> None:
        """Resolve the future with the given result.

        Raises:
            ProtocolViolationError: If the resolver is already complete.
        """
        self._complete(ResolverState.RESOLVED, result)

    def reject(self, reason: Any = None) -> None:
        """Reject the future with the given reason.

        Non-exception reasons are wrapped in a QwxmlError so that awaiting
        code always receives an exception.

        Raises:
            ProtocolViolationError: If the resolver is already complete.
        """
        self._complete(ResolverState.REJECTED, reason)

    def _complete(self, state: ResolverState, param: Any) -> None:
        if self.complete:
            raise ProtocolViolationError(self._state.value)

        if state is ResolverState.RESOLVED:
            if not self._future.cancelled():
                self._future.set_result(param)
        elif state is ResolverState.REJECTED:
            if isinstance(param, BaseException):
                error = param
            elif param is None:
                error = QwxmlError("Resolver rejected without reason")
            else:
                error = QwxmlError(str(param))
            # An awaiter that gave up may have cancelled the future
            if not self._future.cancelled():
                self._future.set_exception(error)
        else:
            raise TypeError(f"Invalid state change of Resolver: {state}")

        self._state = state
        self._value = param

    def __repr__(self) -> str:
        return f"<Resolver {self._state.value}>"
