"""Журнал событий пула (участник TransactionScope)."""

from src.core.domain.events import PoolEvent


class EventLog:
    """Append-only журнал; откат усекает его до длины снапшота.

    Потребитель забирает события через drain(). Снапшот хранит абсолютную
    позицию (drained + len), поэтому откат после drain усекает корректно.
    """

    def __init__(self):
        self._events: list[PoolEvent] = []
        self._drained = 0

    def append(self, event: PoolEvent) -> None:
        self._events.append(event)

    def events(self) -> list[PoolEvent]:
        return list(self._events)

    def drain(self) -> list[PoolEvent]:
        """Вернуть накопленные события и очистить журнал."""
        drained, self._events = self._events, []
        self._drained += len(drained)
        return drained

    def __len__(self) -> int:
        return len(self._events)

    def snapshot(self) -> int:
        return self._drained + len(self._events)

    def restore(self, snapshot: int) -> None:
        del self._events[max(snapshot - self._drained, 0):]
