"""
Shared document store contract.

A store holds one mapping of participant name to a list of ISO dates.
Readers subscribe to a live feed; writers replace the whole document.
There are no per-key writes: concurrent submitters get last-write-wins.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from availmap.errors import StoreReadError

logger = logging.getLogger("availmap.store")

MappingCallback = Callable[[Dict[str, List[Any]]], Any]
ErrorCallback = Callable[[Exception], Any]


@dataclass(eq=False)
class _Listener:
    on_mapping: MappingCallback
    on_error: Optional[ErrorCallback] = None


async def _call(callback: Callable, arg: Any) -> None:
    result = callback(arg)
    if inspect.isawaitable(result):
        await result


class SyncStore:
    """
    Base class for document stores.

    Subclasses implement read() and replace_all(); delivery to subscribers
    is shared. Callbacks may be plain functions or coroutine functions.
    """

    def __init__(self):
        self._listeners: List[_Listener] = []

    async def read(self) -> Dict[str, List[Any]]:
        raise NotImplementedError

    async def replace_all(self, mapping: Mapping[str, Any]) -> None:
        raise NotImplementedError

    async def subscribe(
        self,
        on_mapping: MappingCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        """
        Register for document updates and deliver the current document.

        Returns an unsubscribe function. An initial read failure goes to
        on_error; the subscription stays registered for later updates.
        """
        listener = _Listener(on_mapping, on_error)
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        try:
            mapping = await self.read()
        except StoreReadError as exc:
            await self._deliver_error(listener, exc)
        else:
            await self._deliver(listener, mapping)
        return unsubscribe

    @property
    def has_subscribers(self) -> bool:
        return bool(self._listeners)

    async def publish(self, mapping: Dict[str, List[Any]]) -> None:
        """Push a document to every subscriber."""
        for listener in list(self._listeners):
            await self._deliver(listener, mapping)

    async def publish_error(self, exc: Exception) -> None:
        for listener in list(self._listeners):
            await self._deliver_error(listener, exc)

    async def _deliver(self, listener: _Listener, mapping: Dict[str, List[Any]]) -> None:
        try:
            await _call(listener.on_mapping, {k: list(v) for k, v in mapping.items()})
        except Exception:
            logger.exception("Subscriber failed while handling a document update")

    async def _deliver_error(self, listener: _Listener, exc: Exception) -> None:
        if listener.on_error is None:
            logger.warning("Store read failed with no error handler: %s", exc)
            return
        try:
            await _call(listener.on_error, exc)
        except Exception:
            logger.exception("Subscriber failed while handling a store error")
