"""Reserve Ledger — резервы пула и общее предложение долей.

Единственный способ изменить резервы или supply долей:
- credit_reserve / debit_reserve
- mint_shares / burn_shares

Вызывающие обязаны выполнить все мутации ledger ДО любого внешнего
перевода: к моменту передачи управления другой стороне ledger уже
отражает согласованное состояние.
"""

import logging
from dataclasses import dataclass

from src.core.domain.errors import InvariantViolation, Underflow
from src.core.domain.pool_state import Asset, PoolLifecycle
from src.core.math.numerical_safeguards import validate_non_negative

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Снапшот ledger для отката."""

    reserve_base: int
    reserve_quote: int
    total_shares: int


class ReserveLedger:
    """Резервы BASE/QUOTE и supply долей.

    Инварианты:
    - Все балансы неотрицательны (Underflow при попытке уйти ниже нуля)
    - total_shares == 0 тогда и только тогда, когда оба резерва равны нулю
      (проверяется check_invariants() после завершения операции)
    """

    def __init__(self, reserve_base: int = 0, reserve_quote: int = 0, total_shares: int = 0):
        self._reserves: dict[Asset, int] = {
            Asset.BASE: validate_non_negative("reserve_base", reserve_base),
            Asset.QUOTE: validate_non_negative("reserve_quote", reserve_quote),
        }
        self._total_shares = validate_non_negative("total_shares", total_shares)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def reserves(self) -> tuple[int, int]:
        """(reserve_base, reserve_quote)."""
        return self._reserves[Asset.BASE], self._reserves[Asset.QUOTE]

    def reserve_of(self, asset: Asset) -> int:
        return self._reserves[asset]

    def total_shares(self) -> int:
        return self._total_shares

    def product(self) -> int:
        """k = reserve_base * reserve_quote."""
        return self._reserves[Asset.BASE] * self._reserves[Asset.QUOTE]

    @property
    def lifecycle(self) -> PoolLifecycle:
        return PoolLifecycle.EMPTY if self._total_shares == 0 else PoolLifecycle.FUNDED

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def credit_reserve(self, asset: Asset, amount: int) -> None:
        validate_non_negative("amount", amount)
        self._reserves[asset] += amount

    def debit_reserve(self, asset: Asset, amount: int) -> None:
        """Списание с резерва.

        Raises:
            Underflow: Если amount > текущего резерва
        """
        validate_non_negative("amount", amount)
        current = self._reserves[asset]
        if amount > current:
            raise Underflow(f"debit {amount} exceeds reserve {asset.value}={current}")
        self._reserves[asset] = current - amount

    def mint_shares(self, amount: int) -> None:
        validate_non_negative("amount", amount)
        self._total_shares += amount

    def burn_shares(self, amount: int) -> None:
        """Сжигание долей.

        Raises:
            Underflow: Если amount > total_shares
        """
        validate_non_negative("amount", amount)
        if amount > self._total_shares:
            raise Underflow(f"burn {amount} exceeds total_shares={self._total_shares}")
        self._total_shares -= amount

    # -------------------------------------------------------------------------
    # Invariants / rollback
    # -------------------------------------------------------------------------

    def check_invariants(self) -> None:
        """Проверка: total_shares == 0 тогда и только тогда, когда резервы пусты.

        Raises:
            InvariantViolation: Если доли и резервы рассогласованы
        """
        base, quote = self.reserves()
        empty_reserves = base == 0 and quote == 0
        if (self._total_shares == 0) != empty_reserves:
            raise InvariantViolation(
                f"empty-pool invariant violated: base={base}, quote={quote}, total_shares={self._total_shares}"
            )

    def snapshot(self) -> LedgerSnapshot:
        base, quote = self.reserves()
        return LedgerSnapshot(reserve_base=base, reserve_quote=quote, total_shares=self._total_shares)

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self._reserves[Asset.BASE] = snapshot.reserve_base
        self._reserves[Asset.QUOTE] = snapshot.reserve_quote
        self._total_shares = snapshot.total_shares
        logger.debug(
            "ledger restored: base=%d quote=%d shares=%d",
            snapshot.reserve_base,
            snapshot.reserve_quote,
            snapshot.total_shares,
        )

    def __repr__(self) -> str:
        base, quote = self.reserves()
        return f"ReserveLedger(base={base}, quote={quote}, shares={self._total_shares})"
