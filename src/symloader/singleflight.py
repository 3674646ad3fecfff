"""
Keyed call de-duplication.

SingleFlight runs at most one call per key at a time: the first caller
("leader") executes the function, concurrent callers with the same key
wait for it and share its outcome. Calls for different keys run in
parallel.

SerialFlight is the coarse alternative: every key shares one lock.
"""

import copy
import threading
from typing import Any, Callable, Dict, Optional, Set

from symloader.config import LOCK_GLOBAL, LOCK_PER_NAME
from symloader.exceptions import ConfigError, SymloaderError


class ReentrantFlightError(SymloaderError):
    """Raised when a thread re-enters a call for a key it is already computing."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Re-entrant call for '{key}' while it is being computed")


def _copy_error(error: BaseException) -> BaseException:
    """Fresh exception object for one waiter, keeping the original cause."""
    try:
        clone = copy.copy(error)
    except Exception:
        return error
    clone.__cause__ = error.__cause__
    clone.__traceback__ = None
    return clone


class _Call:
    """One in-flight call and its eventual outcome."""

    __slots__ = ("owner", "done", "result", "error")

    def __init__(self, owner: int):
        self.owner = owner
        self.done = threading.Event()
        self.result: Any = None
        self.error: Optional[BaseException] = None


class SingleFlight:
    """
    Per-key single-flight group.

    Waiting threads are recorded (thread -> key it waits on) so that a
    wait which would close a cycle of leaders waiting on each other is
    refused with ReentrantFlightError instead of blocking forever.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[str, _Call] = {}
        self._waiting: Dict[int, str] = {}

    def _closes_cycle(self, call: _Call, me: int) -> bool:
        # Follow owner -> key it waits on -> that key's owner ...
        owner = call.owner
        seen: Set[int] = set()
        while owner not in seen:
            if owner == me:
                return True
            seen.add(owner)
            key = self._waiting.get(owner)
            if key is None:
                return False
            blocking = self._calls.get(key)
            if blocking is None:
                return False
            owner = blocking.owner
        return False

    def do(self, key: str, fn: Callable[[], Any]) -> Any:
        """
        Run fn() unless a call for `key` is already in flight.

        Waiters receive the leader's return value, or a copy of the
        leader's exception raised in their own thread.

        Raises:
            ReentrantFlightError: Waiting for `key` would deadlock, either
                because this thread computes `key` itself or because its
                leader is (transitively) waiting on this thread
        """
        me = threading.get_ident()
        with self._lock:
            call = self._calls.get(key)
            if call is None:
                call = _Call(owner=me)
                self._calls[key] = call
                leader = True
            else:
                if self._closes_cycle(call, me):
                    raise ReentrantFlightError(key)
                self._waiting[me] = key
                leader = False

        if not leader:
            try:
                call.done.wait()
            finally:
                with self._lock:
                    self._waiting.pop(me, None)
            if call.error is not None:
                raise _copy_error(call.error)
            return call.result

        try:
            call.result = fn()
            return call.result
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                del self._calls[key]
            call.done.set()

    def in_flight(self) -> int:
        """Number of keys currently being computed."""
        with self._lock:
            return len(self._calls)


class SerialFlight:
    """Runs every call under one re-entrant lock, whatever the key."""

    def __init__(self):
        self._lock = threading.RLock()
        self._active: Set[str] = set()

    def do(self, key: str, fn: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._active:
                raise ReentrantFlightError(key)
            self._active.add(key)
            try:
                return fn()
            finally:
                self._active.discard(key)

    def in_flight(self) -> int:
        return len(self._active)


def make_flight(strategy: str):
    """Build the call group for a configured lock strategy."""
    if strategy == LOCK_PER_NAME:
        return SingleFlight()
    if strategy == LOCK_GLOBAL:
        return SerialFlight()
    raise ConfigError(f"Unknown lock strategy '{strategy}'")
