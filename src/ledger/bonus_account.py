"""Bonus Account — изолированный счёт для rebate-выплат.

Rebate никогда не финансируется из резервов swap: счёт пополняется явно
(fund) и учитывается отдельно от reserve_base/reserve_quote, поэтому
constant-product инвариант не зависит от программ лояльности.
"""

import logging

from src.core.domain.errors import Underflow
from src.core.domain.pool_state import Asset
from src.core.math.numerical_safeguards import validate_non_negative

logger = logging.getLogger(__name__)


class BonusAccount:
    """Балансы бонусного счёта по активам + счётчики swap по участникам."""

    def __init__(
        self,
        balances: dict[Asset, int] | None = None,
        swap_counters: dict[str, int] | None = None,
    ):
        self._balances: dict[Asset, int] = {Asset.BASE: 0, Asset.QUOTE: 0}
        for asset, amount in (balances or {}).items():
            asset = Asset(asset)
            self._balances[asset] = validate_non_negative(f"bonus {asset.value}", amount)
        self._swap_counters: dict[str, int] = {
            party: count for party, count in (swap_counters or {}).items() if count > 0
        }

    def balance_of(self, asset: Asset) -> int:
        return self._balances[asset]

    def fund(self, asset: Asset, amount: int) -> None:
        """Учёт пополнения (сам перевод выполняет вызывающий)."""
        validate_non_negative("amount", amount)
        self._balances[asset] += amount
        logger.info("bonus account funded: %s +%d -> %d", asset.value, amount, self._balances[asset])

    def can_cover(self, asset: Asset, amount: int) -> bool:
        return self._balances[asset] >= amount

    def debit(self, asset: Asset, amount: int) -> None:
        """
        Raises:
            Underflow: Если баланса не хватает
        """
        validate_non_negative("amount", amount)
        current = self._balances[asset]
        if amount > current:
            raise Underflow(f"bonus debit {amount} exceeds bonus balance {asset.value}={current}")
        self._balances[asset] = current - amount

    def record_swap(self, party: str) -> int:
        """Инкремент счётчика swap участника. Возвращает новое значение."""
        count = self._swap_counters.get(party, 0) + 1
        self._swap_counters[party] = count
        return count

    def reset_counter(self, party: str) -> None:
        self._swap_counters.pop(party, None)

    def swap_counter(self, party: str) -> int:
        return self._swap_counters.get(party, 0)

    def all_swap_counters(self) -> dict[str, int]:
        return dict(self._swap_counters)

    def snapshot(self) -> tuple[dict[Asset, int], dict[str, int]]:
        return dict(self._balances), dict(self._swap_counters)

    def restore(self, snapshot: tuple[dict[Asset, int], dict[str, int]]) -> None:
        balances, counters = snapshot
        self._balances = dict(balances)
        self._swap_counters = dict(counters)
