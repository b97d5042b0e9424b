"""
External Collaborators — контракты внешних сторон пула

- AssetTransfer: перемещение актива между аккаунтом и пулом (по одному на актив)
- Clock: текущее логическое время для проверки deadline
- Transactional: коллаборатор, состояние которого откатывается вместе с пулом
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AssetTransfer(Protocol):
    """Перемещение одного актива между аккаунтом и пулом.

    transfer_out может выполнить произвольный код получателя до возврата.
    False или исключение — отказ всей операции.
    """

    def transfer_in(self, account: str, amount: int) -> bool: ...

    def transfer_out(self, account: str, amount: int) -> bool: ...


@runtime_checkable
class Clock(Protocol):
    """Монотонное логическое время."""

    def now(self) -> int: ...


@runtime_checkable
class Transactional(Protocol):
    """Участник TransactionScope: снапшот до операции, восстановление при откате."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...
