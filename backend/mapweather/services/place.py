import logging
from typing import Callable, List, Optional

log = logging.getLogger("mapweather.place")

Listener = Callable[[Optional[str]], None]


class PlaceName:
    """Observable place name shared by the resolver and the forecast side.

    Listeners run synchronously on every actual change of the value.
    """

    def __init__(self, value: Optional[str] = None):
        self._value = value
        self._listeners: List[Listener] = []

    @property
    def value(self) -> Optional[str]:
        return self._value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, value: Optional[str]) -> bool:
        """Store `value`; returns True if it changed (listeners were notified)."""
        if value == self._value:
            return False
        self._value = value
        log.debug("Place name -> %r", value)
        for listener in list(self._listeners):
            listener(value)
        return True
