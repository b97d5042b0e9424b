"""Pool — агрегат пула ликвидности

Владеет ReserveLedger, ShareRegistry, BonusAccount, статистикой и журналом
событий. Передаёт их по ссылке в LiquidityManager и SwapEngine; глобального
состояния нет, в одном процессе может жить сколько угодно независимых пулов.

Каждая публичная мутирующая операция выполняется в TransactionScope,
участники которого — все компоненты состояния пула и transactional
коллабораторы переводов.
"""

import logging
from typing import Mapping

from src.collaborators import AssetTransfer, Clock, Transactional
from src.core.domain.errors import InvariantViolation
from src.core.domain.events import PoolEvent
from src.core.domain.pool_state import Asset, BonusState, PoolLifecycle, PoolState
from src.gatekeeper.guards import GuardConfig, OperationGuard
from src.ledger import BonusAccount, ReserveLedger, ShareRegistry
from src.pool.config import PoolConfig
from src.pool.event_log import EventLog
from src.pool.liquidity_manager import DepositPreview, LiquidityManager, WithdrawPreview
from src.pool.swap_engine import SwapEngine, SwapQuote, SwapStats
from src.pool.transaction import TransactionScope, TransferDirection, request_transfer

logger = logging.getLogger(__name__)


class Pool:
    """Constant-product пул BASE/QUOTE."""

    def __init__(
        self,
        clock: Clock,
        transfers: Mapping[Asset, AssetTransfer],
        config: PoolConfig | None = None,
        guard_config: GuardConfig | None = None,
        ledger: ReserveLedger | None = None,
        shares: ShareRegistry | None = None,
        stats: SwapStats | None = None,
        bonus: BonusAccount | None = None,
    ):
        """
        Args:
            clock: источник логического времени для deadline
            transfers: коллаборатор перевода для каждого актива
            config: конфигурация пула (опционально, используется default)
            guard_config: конфигурация Guard Layer
            ledger / shares / stats / bonus: восстановленное состояние (см. from_state)
        """
        missing = [asset.value for asset in Asset if asset not in transfers]
        if missing:
            raise ValueError(f"transfers missing for assets: {missing}")

        self.config = config or PoolConfig()
        self.clock = clock
        self.transfers = dict(transfers)

        self.ledger = ledger or ReserveLedger()
        self.shares = shares or ShareRegistry()
        self.bonus = bonus or BonusAccount()
        self.stats = stats or SwapStats()
        self.event_log = EventLog()
        self.guard = OperationGuard(clock, guard_config)

        self.liquidity = LiquidityManager(
            ledger=self.ledger,
            shares=self.shares,
            guard=self.guard,
            transfers=self.transfers,
            events=self.event_log,
            transaction=self._transaction,
            config=self.config,
        )
        self.swaps = SwapEngine(
            ledger=self.ledger,
            guard=self.guard,
            transfers=self.transfers,
            events=self.event_log,
            stats=self.stats,
            bonus=self.bonus,
            transaction=self._transaction,
            config=self.config,
        )
        self.check_invariants()

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def _participants(self) -> list[Transactional]:
        participants: list[Transactional] = [
            self.ledger,
            self.shares,
            self.bonus,
            self.stats,
            self.event_log,
        ]
        # Переводы, которые внешний секвенсор откатывает вместе с операцией
        for transfer in self.transfers.values():
            if isinstance(transfer, Transactional) and transfer not in participants:
                participants.append(transfer)
        return participants

    def _transaction(self, label: str) -> TransactionScope:
        return TransactionScope(label, self._participants(), verify=self.check_invariants)

    def check_invariants(self) -> None:
        """Пустота долей и резервов, согласованность балансов долей с supply.

        Raises:
            InvariantViolation
        """
        self.ledger.check_invariants()
        if self.shares.total() != self.ledger.total_shares():
            raise InvariantViolation(
                f"share balances sum {self.shares.total()} != total_shares {self.ledger.total_shares()}"
            )

    # -------------------------------------------------------------------------
    # Liquidity
    # -------------------------------------------------------------------------

    def deposit(self, party: str, desired_quote: int, min_shares: int, max_base: int, deadline: int) -> int:
        return self.liquidity.deposit(party, desired_quote, min_shares, max_base, deadline)

    def withdraw(
        self, party: str, shares_to_burn: int, min_base: int, min_quote: int, deadline: int
    ) -> tuple[int, int]:
        return self.liquidity.withdraw(party, shares_to_burn, min_base, min_quote, deadline)

    def preview_deposit(self, desired_quote: int) -> DepositPreview:
        return self.liquidity.preview_deposit(desired_quote)

    def preview_withdraw(self, shares_to_burn: int) -> WithdrawPreview:
        return self.liquidity.preview_withdraw(shares_to_burn)

    # -------------------------------------------------------------------------
    # Swaps
    # -------------------------------------------------------------------------

    def swap_exact_input(
        self, party: str, asset_in: Asset, amount_in: int, asset_out: Asset, min_amount_out: int, deadline: int
    ) -> int:
        return self.swaps.swap_exact_input(party, asset_in, amount_in, asset_out, min_amount_out, deadline)

    def swap_exact_output(
        self, party: str, asset_in: Asset, max_amount_in: int, asset_out: Asset, amount_out: int, deadline: int
    ) -> int:
        return self.swaps.swap_exact_output(party, asset_in, max_amount_in, asset_out, amount_out, deadline)

    def sell_base(self, party: str, amount_in: int, min_quote_out: int, deadline: int) -> int:
        return self.swaps.sell_base(party, amount_in, min_quote_out, deadline)

    def sell_quote(self, party: str, amount_in: int, min_base_out: int, deadline: int) -> int:
        return self.swaps.sell_quote(party, amount_in, min_base_out, deadline)

    def buy_base(self, party: str, amount_out: int, max_quote_in: int, deadline: int) -> int:
        return self.swaps.buy_base(party, amount_out, max_quote_in, deadline)

    def buy_quote(self, party: str, amount_out: int, max_base_in: int, deadline: int) -> int:
        return self.swaps.buy_quote(party, amount_out, max_base_in, deadline)

    def quote_exact_input(self, asset_in: Asset, amount_in: int) -> SwapQuote:
        return self.swaps.quote_exact_input(asset_in, amount_in)

    def quote_exact_output(self, asset_in: Asset, amount_out: int) -> SwapQuote:
        return self.swaps.quote_exact_output(asset_in, amount_out)

    # -------------------------------------------------------------------------
    # Bonus account
    # -------------------------------------------------------------------------

    def fund_bonus(self, funder: str, asset: Asset, amount: int, deadline: int) -> None:
        """Пополнить бонусный счёт (резервы swap не затрагиваются)."""
        self.guard.enforce(self.guard.check_preconditions(deadline, {"amount": amount}))
        with self._transaction("fund_bonus"):
            self.bonus.fund(asset, amount)
            request_transfer(self.transfers[asset], TransferDirection.IN, asset, funder, amount)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def reserves(self) -> tuple[int, int]:
        return self.ledger.reserves()

    def total_shares(self) -> int:
        return self.ledger.total_shares()

    def share_balance_of(self, party: str) -> int:
        return self.shares.balance_of(party)

    @property
    def lifecycle(self) -> PoolLifecycle:
        return self.ledger.lifecycle

    def events(self) -> list[PoolEvent]:
        return self.event_log.events()

    def drain_events(self) -> list[PoolEvent]:
        """Забрать накопленные события и очистить журнал."""
        return self.event_log.drain()

    def price_of_one_base_in_quote(self) -> int:
        return self.swaps.price_of_one_base_in_quote()

    def price_of_one_quote_in_base(self) -> int:
        return self.swaps.price_of_one_quote_in_base()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def export_state(self) -> PoolState:
        """Снапшот персистентного состояния."""
        base, quote = self.ledger.reserves()
        return PoolState(
            reserve_base=base,
            reserve_quote=quote,
            total_shares=self.ledger.total_shares(),
            fee=self.config.fee_rate(),
            share_balances=self.shares.all_balances(),
            stats=self.stats.current(),
            bonus=BonusState(
                balance_base=self.bonus.balance_of(Asset.BASE),
                balance_quote=self.bonus.balance_of(Asset.QUOTE),
                swap_counters=self.bonus.all_swap_counters(),
            ),
        )

    @classmethod
    def from_state(
        cls,
        state: PoolState,
        clock: Clock,
        transfers: Mapping[Asset, AssetTransfer],
        config: PoolConfig | None = None,
        guard_config: GuardConfig | None = None,
    ) -> "Pool":
        """Восстановление пула из снапшота.

        Комиссия берётся из снапшота; остальные параметры — из config.

        Raises:
            ValueError: Если config задаёт комиссию, отличную от снапшота
        """
        base_config = config or PoolConfig(
            fee_numerator=state.fee.numerator, fee_denominator=state.fee.denominator
        )
        if (base_config.fee_numerator, base_config.fee_denominator) != (
            state.fee.numerator,
            state.fee.denominator,
        ):
            raise ValueError(
                f"config fee {base_config.fee_numerator}/{base_config.fee_denominator} "
                f"does not match persisted fee {state.fee.numerator}/{state.fee.denominator}"
            )

        logger.info(
            "pool restored: base=%d quote=%d shares=%d holders=%d bonus=%d/%d",
            state.reserve_base, state.reserve_quote, state.total_shares, len(state.share_balances),
            state.bonus.balance_base, state.bonus.balance_quote,
        )
        return cls(
            clock=clock,
            transfers=transfers,
            config=base_config,
            guard_config=guard_config,
            ledger=ReserveLedger(state.reserve_base, state.reserve_quote, state.total_shares),
            shares=ShareRegistry(state.share_balances),
            stats=SwapStats(state.stats),
            bonus=BonusAccount(
                balances={Asset.BASE: state.bonus.balance_base, Asset.QUOTE: state.bonus.balance_quote},
                swap_counters=state.bonus.swap_counters,
            ),
        )

    def __repr__(self) -> str:
        base, quote = self.reserves()
        return f"Pool(base={base}, quote={quote}, shares={self.total_shares()}, {self.lifecycle.value})"
