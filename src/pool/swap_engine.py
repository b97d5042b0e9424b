"""Swap Engine — exact-input и exact-output swap

- swap_exact_input: вызывающий фиксирует amount_in, получает вычисленный amount_out
- swap_exact_output: вызывающий фиксирует amount_out, платит вычисленный amount_in
- sell_*: продажа точной суммы, делегирует ТОЛЬКО в swap_exact_input
- buy_*: покупка точной суммы, делегирует в swap_exact_output

Rebate выплачивается исключительно из BonusAccount; резервы swap
для промо-выплат не используются.

После каждого swap проверяется:
    reserve_in_after * reserve_out_after >= reserve_in_before * reserve_out_before
(строго больше при ненулевой комиссии).
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from src.collaborators import AssetTransfer
from src.core.domain.errors import (
    InputTooHigh,
    InvalidAssetPair,
    InvariantViolation,
    OutputTooLow,
)
from src.core.domain.events import RebatePaid, Swapped
from src.core.domain.pool_state import Asset, PoolStats
from src.core.math.numerical_safeguards import validate_non_negative
from src.core.math.rate_math import spot_price, swap_input_from_output, swap_output_from_input
from src.gatekeeper.guards import Bound, BoundKind, OperationGuard
from src.ledger import BonusAccount, ReserveLedger
from src.pool.config import PoolConfig
from src.pool.event_log import EventLog
from src.pool.transaction import TransactionScope, TransferDirection, request_transfer

logger = logging.getLogger(__name__)


# =============================================================================
# STATS
# =============================================================================


class SwapStats:
    """Счётчики swap (участник TransactionScope)."""

    def __init__(self, stats: PoolStats | None = None):
        self._stats = stats or PoolStats()

    def current(self) -> PoolStats:
        return self._stats

    def record(self, asset_in: Asset, amount_in: int) -> None:
        volume_base = self._stats.volume_base_in + (amount_in if asset_in is Asset.BASE else 0)
        volume_quote = self._stats.volume_quote_in + (amount_in if asset_in is Asset.QUOTE else 0)
        self._stats = PoolStats(
            swap_count=self._stats.swap_count + 1,
            volume_base_in=volume_base,
            volume_quote_in=volume_quote,
        )

    def snapshot(self) -> PoolStats:
        return self._stats

    def restore(self, snapshot: PoolStats) -> None:
        self._stats = snapshot


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class SwapQuote:
    """Котировка swap без мутации."""

    asset_in: Asset
    amount_in: int
    asset_out: Asset
    amount_out: int
    reserve_in: int
    reserve_out: int


# =============================================================================
# ENGINE
# =============================================================================


class SwapEngine:
    """Exact-input / exact-output swap над ReserveLedger."""

    def __init__(
        self,
        ledger: ReserveLedger,
        guard: OperationGuard,
        transfers: Mapping[Asset, AssetTransfer],
        events: EventLog,
        stats: SwapStats,
        bonus: BonusAccount,
        transaction: Callable[[str], TransactionScope],
        config: PoolConfig | None = None,
    ):
        self.ledger = ledger
        self.guard = guard
        self.transfers = transfers
        self.events = events
        self.stats = stats
        self.bonus = bonus
        self._transaction = transaction
        self.config = config or PoolConfig()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def quote_exact_input(self, asset_in: Asset, amount_in: int) -> SwapQuote:
        """Котировка amount_out для точного amount_in."""
        asset_out = asset_in.other
        reserve_in, reserve_out = self.ledger.reserve_of(asset_in), self.ledger.reserve_of(asset_out)
        amount_out = swap_output_from_input(amount_in, reserve_in, reserve_out, self.config.fee)
        return SwapQuote(asset_in, amount_in, asset_out, amount_out, reserve_in, reserve_out)

    def quote_exact_output(self, asset_in: Asset, amount_out: int) -> SwapQuote:
        """Котировка amount_in для точного amount_out."""
        asset_out = asset_in.other
        reserve_in, reserve_out = self.ledger.reserve_of(asset_in), self.ledger.reserve_of(asset_out)
        amount_in = swap_input_from_output(amount_out, reserve_in, reserve_out, self.config.fee)
        return SwapQuote(asset_in, amount_in, asset_out, amount_out, reserve_in, reserve_out)

    def price_of_one_base_in_quote(self) -> int:
        """QUOTE за config.price_unit BASE."""
        return spot_price(
            self.config.price_unit,
            self.ledger.reserve_of(Asset.BASE),
            self.ledger.reserve_of(Asset.QUOTE),
            self.config.fee,
        )

    def price_of_one_quote_in_base(self) -> int:
        """BASE за config.price_unit QUOTE."""
        return spot_price(
            self.config.price_unit,
            self.ledger.reserve_of(Asset.QUOTE),
            self.ledger.reserve_of(Asset.BASE),
            self.config.fee,
        )

    # -------------------------------------------------------------------------
    # Swaps
    # -------------------------------------------------------------------------

    def swap_exact_input(
        self,
        party: str,
        asset_in: Asset,
        amount_in: int,
        asset_out: Asset,
        min_amount_out: int,
        deadline: int,
    ) -> int:
        """Swap точного amount_in.

        Returns:
            amount_out

        Raises:
            DeadlinePassed, ZeroAmount, InvalidAssetPair, InsufficientLiquidity,
            OutputTooLow, TransferFailed
        """
        validate_non_negative("min_amount_out", min_amount_out)
        self.guard.enforce(self.guard.check_preconditions(deadline, {"amount_in": amount_in}))
        self._check_pair(asset_in, asset_out)

        quote = self.quote_exact_input(asset_in, amount_in)
        self.guard.enforce(
            self.guard.check_bounds(
                [Bound("min_amount_out", quote.amount_out, min_amount_out, BoundKind.MIN, OutputTooLow)]
            )
        )
        if quote.amount_out == 0:
            raise OutputTooLow(f"amount_in {amount_in} {asset_in.value} is too small to buy any output")

        self._execute(party, quote, exact_output=False)
        return quote.amount_out

    def swap_exact_output(
        self,
        party: str,
        asset_in: Asset,
        max_amount_in: int,
        asset_out: Asset,
        amount_out: int,
        deadline: int,
    ) -> int:
        """Swap за точный amount_out.

        Returns:
            amount_in

        Raises:
            DeadlinePassed, ZeroAmount, InvalidAssetPair, InsufficientLiquidity,
            InputTooHigh, TransferFailed
        """
        validate_non_negative("max_amount_in", max_amount_in)
        self.guard.enforce(self.guard.check_preconditions(deadline, {"amount_out": amount_out}))
        self._check_pair(asset_in, asset_out)

        quote = self.quote_exact_output(asset_in, amount_out)
        self.guard.enforce(
            self.guard.check_bounds(
                [Bound("max_amount_in", quote.amount_in, max_amount_in, BoundKind.MAX, InputTooHigh)]
            )
        )

        self._execute(party, quote, exact_output=True)
        return quote.amount_in

    def sell_base(self, party: str, amount_in: int, min_quote_out: int, deadline: int) -> int:
        """Продать точно amount_in BASE за QUOTE."""
        return self.swap_exact_input(party, Asset.BASE, amount_in, Asset.QUOTE, min_quote_out, deadline)

    def sell_quote(self, party: str, amount_in: int, min_base_out: int, deadline: int) -> int:
        """Продать точно amount_in QUOTE за BASE."""
        return self.swap_exact_input(party, Asset.QUOTE, amount_in, Asset.BASE, min_base_out, deadline)

    def buy_base(self, party: str, amount_out: int, max_quote_in: int, deadline: int) -> int:
        """Купить точно amount_out BASE за QUOTE."""
        return self.swap_exact_output(party, Asset.QUOTE, max_quote_in, Asset.BASE, amount_out, deadline)

    def buy_quote(self, party: str, amount_out: int, max_base_in: int, deadline: int) -> int:
        """Купить точно amount_out QUOTE за BASE."""
        return self.swap_exact_output(party, Asset.BASE, max_base_in, Asset.QUOTE, amount_out, deadline)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_pair(asset_in: Asset, asset_out: Asset) -> None:
        if asset_in is asset_out:
            raise InvalidAssetPair(f"asset_in and asset_out are both {asset_in.value}")

    def _execute(self, party: str, quote: SwapQuote, exact_output: bool) -> None:
        k_before = quote.reserve_in * quote.reserve_out

        with self._transaction("swap"):
            self.ledger.credit_reserve(quote.asset_in, quote.amount_in)
            self.ledger.debit_reserve(quote.asset_out, quote.amount_out)
            self._check_product(k_before)

            self.stats.record(quote.asset_in, quote.amount_in)
            rebate = self._accrue_rebate(party)
            self.events.append(
                Swapped(
                    party=party,
                    asset_in=quote.asset_in,
                    amount_in=quote.amount_in,
                    asset_out=quote.asset_out,
                    amount_out=quote.amount_out,
                    exact_output=exact_output,
                )
            )

            request_transfer(
                self.transfers[quote.asset_in], TransferDirection.IN, quote.asset_in, party, quote.amount_in
            )
            request_transfer(
                self.transfers[quote.asset_out], TransferDirection.OUT, quote.asset_out, party, quote.amount_out
            )
            if rebate:
                asset = self.config.rebate.asset
                request_transfer(self.transfers[asset], TransferDirection.OUT, asset, party, rebate)

        logger.info(
            "swap: party=%s in=%d %s out=%d %s exact_output=%s",
            party, quote.amount_in, quote.asset_in.value, quote.amount_out, quote.asset_out.value, exact_output,
        )

    def _check_product(self, k_before: int) -> None:
        k_after = self.ledger.product()
        zero_fee = self.config.fee_numerator == self.config.fee_denominator
        if k_after < k_before or (k_after == k_before and not zero_fee):
            raise InvariantViolation(f"constant product did not grow: {k_before} -> {k_after}")

    def _accrue_rebate(self, party: str) -> int:
        """Счётчик swap участника и rebate из бонусного счёта.

        Returns:
            Сумма rebate к переводу (0 если не положен или не покрыт)
        """
        policy = self.config.rebate
        if not policy.enabled:
            return 0

        if self.bonus.record_swap(party) < policy.every_n_swaps:
            return 0

        self.bonus.reset_counter(party)
        if not self.bonus.can_cover(policy.asset, policy.amount):
            logger.warning(
                "rebate skipped for %s: bonus balance %d < %d %s",
                party, self.bonus.balance_of(policy.asset), policy.amount, policy.asset.value,
            )
            return 0

        self.bonus.debit(policy.asset, policy.amount)
        self.events.append(RebatePaid(party=party, asset=policy.asset, amount=policy.amount))
        return policy.amount
