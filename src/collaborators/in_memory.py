"""
In-memory коллабораторы для симуляции и тестов

- ManualClock: логическое время, продвигаемое вручную
- InMemoryAssetBank: балансы одного актива в памяти с инъекцией отказов
  и on-receive hook, который может повторно вызвать пул (reentrancy)

InMemoryAssetBank реализует Transactional: внешний секвенсор применяет
операцию атомарно, поэтому при откате операции пула откатываются и
уже выполненные переводы.
"""

import logging
from typing import Callable

from src.core.math.numerical_safeguards import validate_non_negative

logger = logging.getLogger(__name__)

# Аккаунт пула в InMemoryAssetBank
POOL_ACCOUNT = "__pool__"

ReceiveHook = Callable[[str, int], None]


class ManualClock:
    """Логическое время, продвигаемое извне."""

    def __init__(self, start: int = 0):
        self._now = validate_non_negative("start", start)

    def now(self) -> int:
        return self._now

    def advance(self, delta: int = 1) -> int:
        self._now += validate_non_negative("delta", delta)
        return self._now

    def set(self, value: int) -> None:
        """Установка времени (не может идти назад)."""
        validate_non_negative("value", value)
        if value < self._now:
            raise ValueError(f"clock is monotonic: {value} < {self._now}")
        self._now = value


class InMemoryAssetBank:
    """Балансы одного актива в памяти.

    - transfer_in списывает с аккаунта и зачисляет на POOL_ACCOUNT
    - transfer_out списывает с POOL_ACCOUNT, зачисляет получателю и вызывает
      его on-receive hook (если зарегистрирован)
    - fail_next() заставляет следующие переводы вернуть False
    """

    def __init__(self, name: str, balances: dict[str, int] | None = None):
        self.name = name
        self._balances: dict[str, int] = dict(balances or {})
        self._hooks: dict[str, ReceiveHook] = {}
        self._fail_next = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, account: str, amount: int) -> None:
        validate_non_negative("amount", amount)
        self._balances[account] = self.balance_of(account) + amount

    def on_receive(self, account: str, hook: ReceiveHook | None) -> None:
        """Регистрация (или снятие, hook=None) кода, выполняемого при получении."""
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    def fail_next(self, count: int = 1) -> None:
        self._fail_next = validate_non_negative("count", count)

    def transfer_in(self, account: str, amount: int) -> bool:
        if self._consume_failure():
            return False
        if self.balance_of(account) < amount:
            logger.debug(
                "%s transfer_in rejected: %s holds %d < %d",
                self.name, account, self.balance_of(account), amount,
            )
            return False
        self._move(account, POOL_ACCOUNT, amount)
        return True

    def transfer_out(self, account: str, amount: int) -> bool:
        if self._consume_failure():
            return False
        if self.balance_of(POOL_ACCOUNT) < amount:
            return False
        self._move(POOL_ACCOUNT, account, amount)
        hook = self._hooks.get(account)
        if hook is not None:
            hook(self.name, amount)
        return True

    def snapshot(self) -> dict[str, int]:
        return dict(self._balances)

    def restore(self, snapshot: dict[str, int]) -> None:
        self._balances = dict(snapshot)

    def _consume_failure(self) -> bool:
        if self._fail_next > 0:
            self._fail_next -= 1
            return True
        return False

    def _move(self, source: str, target: str, amount: int) -> None:
        self._balances[source] = self.balance_of(source) - amount
        self._balances[target] = self.balance_of(target) + amount
