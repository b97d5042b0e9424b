"""Share Registry — балансы долей по участникам.

Принадлежит Liquidity Manager (пул хранит только общий supply).
Нулевые балансы не хранятся.
"""

from src.core.domain.errors import InsufficientShares
from src.core.math.numerical_safeguards import validate_non_negative


class ShareRegistry:
    """Детерминированная таблица party → shares."""

    def __init__(self, balances: dict[str, int] | None = None):
        self._balances: dict[str, int] = {}
        for party, amount in (balances or {}).items():
            self._set(party, validate_non_negative("balance", amount))

    def balance_of(self, party: str) -> int:
        return self._balances.get(party, 0)

    def credit(self, party: str, amount: int) -> None:
        validate_non_negative("amount", amount)
        self._set(party, self.balance_of(party) + amount)

    def debit(self, party: str, amount: int) -> None:
        """Списание долей участника.

        Raises:
            InsufficientShares: Если баланс меньше amount
        """
        validate_non_negative("amount", amount)
        current = self.balance_of(party)
        if amount > current:
            raise InsufficientShares(f"party {party!r} holds {current} shares, requested {amount}")
        self._set(party, current - amount)

    def total(self) -> int:
        return sum(self._balances.values())

    def all_balances(self) -> dict[str, int]:
        return dict(self._balances)

    def snapshot(self) -> dict[str, int]:
        return dict(self._balances)

    def restore(self, snapshot: dict[str, int]) -> None:
        self._balances = dict(snapshot)

    def _set(self, party: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop(party, None)
        else:
            self._balances[party] = amount

    def __repr__(self) -> str:
        return f"ShareRegistry({len(self._balances)} holders)"
