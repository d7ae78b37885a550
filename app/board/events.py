# app/board/events.py
from typing import Any, Callable

Listener = Callable[[str, Any], None]


class EventSource:
    """Synchronous fan-out of registry mutations to listeners.

    The presentation layer re-renders on every event; the change ledger
    listens to step events while a settings session is open.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def listen(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: str, payload: Any = None) -> None:
        for listener in list(self._listeners):
            listener(event, payload)
