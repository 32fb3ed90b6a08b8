"""Cooperative cancellation token for a single turn."""

import asyncio
from collections.abc import Callable

from herald.errors import StreamCancelledError


class CancellationToken:
    """First-class cancellation signal passed into the transport reader.

    Cancelling runs registered callbacks synchronously, which lets the
    owner abort an in-flight read immediately. The reader also checks the
    token at every read iteration.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Request cancellation. Returns False if already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        return True

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it.

        Runs immediately if the token is already cancelled.
        """
        if self._cancelled:
            callback()
            return lambda: None

        self._callbacks.append(callback)

        def remove() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return remove

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise StreamCancelledError()

    async def wait(self) -> None:
        """Wait until cancellation is requested."""
        await self._event.wait()
