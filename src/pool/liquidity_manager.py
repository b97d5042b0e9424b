"""Liquidity Manager — депозит и вывод ликвидности

deposit:
- Bootstrap (total_shares == 0): required_base = desired_quote (ratio 1:1),
  minted = desired_quote, MinimumLiquidity ниже порога
- Иначе: required_base = quote_proportional(desired_quote, reserve_quote, reserve_base),
  minted = floor(desired_quote * total_shares / reserve_quote)

withdraw:
- base = floor(reserve_base * shares / total_shares)
- quote = floor(reserve_quote * shares / total_shares)

Порядок: guards → расчёт → мутация ledger → внешние переводы.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from src.collaborators import AssetTransfer
from src.core.domain.errors import (
    ExcessiveInput,
    InsufficientShares,
    MinimumLiquidity,
    SlippageTooHigh,
)
from src.core.domain.events import LiquidityAdded, LiquidityRemoved
from src.core.domain.pool_state import Asset
from src.core.math.numerical_safeguards import validate_non_negative
from src.core.math.rate_math import payout_for_shares, quote_proportional, shares_for_deposit
from src.gatekeeper.guards import Bound, BoundKind, OperationGuard
from src.ledger import ReserveLedger, ShareRegistry
from src.pool.config import PoolConfig
from src.pool.event_log import EventLog
from src.pool.transaction import TransactionScope, TransferDirection, request_transfer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositPreview:
    """Расчёт депозита без мутации."""

    required_base: int
    minted_shares: int
    is_bootstrap: bool


@dataclass(frozen=True)
class WithdrawPreview:
    """Расчёт вывода без мутации."""

    base_out: int
    quote_out: int


class LiquidityManager:
    """Депозит/вывод ликвидности и учёт балансов долей."""

    def __init__(
        self,
        ledger: ReserveLedger,
        shares: ShareRegistry,
        guard: OperationGuard,
        transfers: Mapping[Asset, AssetTransfer],
        events: EventLog,
        transaction: Callable[[str], TransactionScope],
        config: PoolConfig | None = None,
    ):
        self.ledger = ledger
        self.shares = shares
        self.guard = guard
        self.transfers = transfers
        self.events = events
        self._transaction = transaction
        self.config = config or PoolConfig()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def share_balance_of(self, party: str) -> int:
        return self.shares.balance_of(party)

    def preview_deposit(self, desired_quote: int) -> DepositPreview:
        """Required BASE и выпускаемые доли для desired_quote.

        Raises:
            MinimumLiquidity: bootstrap ниже minimum_liquidity
        """
        validate_non_negative("desired_quote", desired_quote)
        reserve_base, reserve_quote = self.ledger.reserves()
        total_shares = self.ledger.total_shares()

        if total_shares == 0:
            if desired_quote < self.config.minimum_liquidity:
                raise MinimumLiquidity(
                    f"bootstrap deposit {desired_quote} below minimum {self.config.minimum_liquidity}"
                )
            return DepositPreview(
                required_base=desired_quote,
                minted_shares=desired_quote,
                is_bootstrap=True,
            )

        return DepositPreview(
            required_base=quote_proportional(desired_quote, reserve_quote, reserve_base),
            minted_shares=shares_for_deposit(desired_quote, reserve_quote, total_shares),
            is_bootstrap=False,
        )

    def preview_withdraw(self, shares_to_burn: int) -> WithdrawPreview:
        """Выплата BASE/QUOTE за shares_to_burn.

        Raises:
            InsufficientShares: shares_to_burn > total_shares
        """
        validate_non_negative("shares_to_burn", shares_to_burn)
        reserve_base, reserve_quote = self.ledger.reserves()
        total_shares = self.ledger.total_shares()
        return WithdrawPreview(
            base_out=payout_for_shares(shares_to_burn, reserve_base, total_shares),
            quote_out=payout_for_shares(shares_to_burn, reserve_quote, total_shares),
        )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def deposit(
        self,
        party: str,
        desired_quote: int,
        min_shares: int,
        max_base: int,
        deadline: int,
    ) -> int:
        """Депозит desired_quote QUOTE и пропорционального BASE.

        Args:
            party: депозитор
            desired_quote: депонируемый QUOTE
            min_shares: минимально приемлемые доли
            max_base: максимально допустимый BASE
            deadline: логическое время, после которого операция отклоняется

        Returns:
            Число выпущенных долей

        Raises:
            DeadlinePassed, ZeroAmount, MinimumLiquidity, ExcessiveInput,
            SlippageTooHigh, TransferFailed
        """
        validate_non_negative("min_shares", min_shares)
        validate_non_negative("max_base", max_base)
        self.guard.enforce(
            self.guard.check_preconditions(deadline, {"desired_quote": desired_quote})
        )

        preview = self.preview_deposit(desired_quote)
        self.guard.enforce(
            self.guard.check_bounds(
                [
                    Bound("max_base", preview.required_base, max_base, BoundKind.MAX, ExcessiveInput),
                    Bound("min_shares", preview.minted_shares, min_shares, BoundKind.MIN, SlippageTooHigh),
                ]
            )
        )
        if preview.minted_shares == 0:
            raise SlippageTooHigh(f"deposit of {desired_quote} quote would mint zero shares")

        logger.debug(
            "deposit computed: party=%s quote=%d base=%d shares=%d bootstrap=%s",
            party, desired_quote, preview.required_base, preview.minted_shares, preview.is_bootstrap,
        )

        with self._transaction("deposit"):
            self.ledger.credit_reserve(Asset.BASE, preview.required_base)
            self.ledger.credit_reserve(Asset.QUOTE, desired_quote)
            self.ledger.mint_shares(preview.minted_shares)
            self.shares.credit(party, preview.minted_shares)
            self.events.append(
                LiquidityAdded(
                    party=party,
                    base_deposited=preview.required_base,
                    quote_deposited=desired_quote,
                    shares_minted=preview.minted_shares,
                )
            )

            request_transfer(
                self.transfers[Asset.BASE], TransferDirection.IN, Asset.BASE, party, preview.required_base
            )
            request_transfer(
                self.transfers[Asset.QUOTE], TransferDirection.IN, Asset.QUOTE, party, desired_quote
            )

        logger.info(
            "liquidity added: party=%s base=%d quote=%d shares=%d",
            party, preview.required_base, desired_quote, preview.minted_shares,
        )
        return preview.minted_shares

    def withdraw(
        self,
        party: str,
        shares_to_burn: int,
        min_base: int,
        min_quote: int,
        deadline: int,
    ) -> tuple[int, int]:
        """Сжечь shares_to_burn долей и вывести пропорциональную часть резервов.

        Returns:
            (base_out, quote_out)

        Raises:
            DeadlinePassed, ZeroAmount, InsufficientShares, SlippageTooHigh,
            TransferFailed
        """
        validate_non_negative("min_base", min_base)
        validate_non_negative("min_quote", min_quote)
        self.guard.enforce(
            self.guard.check_preconditions(deadline, {"shares_to_burn": shares_to_burn})
        )

        balance = self.shares.balance_of(party)
        if balance < shares_to_burn:
            raise InsufficientShares(
                f"party {party!r} holds {balance} shares, requested {shares_to_burn}"
            )

        preview = self.preview_withdraw(shares_to_burn)
        self.guard.enforce(
            self.guard.check_bounds(
                [
                    Bound("min_base", preview.base_out, min_base, BoundKind.MIN, SlippageTooHigh),
                    Bound("min_quote", preview.quote_out, min_quote, BoundKind.MIN, SlippageTooHigh),
                ]
            )
        )

        with self._transaction("withdraw"):
            # Ledger фиксируется до передачи управления получателю
            self.shares.debit(party, shares_to_burn)
            self.ledger.burn_shares(shares_to_burn)
            self.ledger.debit_reserve(Asset.BASE, preview.base_out)
            self.ledger.debit_reserve(Asset.QUOTE, preview.quote_out)
            self.events.append(
                LiquidityRemoved(
                    party=party,
                    base_withdrawn=preview.base_out,
                    quote_withdrawn=preview.quote_out,
                    shares_burned=shares_to_burn,
                )
            )

            request_transfer(
                self.transfers[Asset.BASE], TransferDirection.OUT, Asset.BASE, party, preview.base_out
            )
            request_transfer(
                self.transfers[Asset.QUOTE], TransferDirection.OUT, Asset.QUOTE, party, preview.quote_out
            )

        logger.info(
            "liquidity removed: party=%s base=%d quote=%d shares=%d",
            party, preview.base_out, preview.quote_out, shares_to_burn,
        )
        return preview.base_out, preview.quote_out
