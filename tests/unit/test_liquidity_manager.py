"""
Тесты для Liquidity Manager — deposit / withdraw

Проверяемые свойства:
1. Bootstrap 1:1, MinimumLiquidity, ZeroAmount
2. Пропорциональность: minted == floor(quote * total_shares / reserve_quote)
3. Round-trip: депозит и немедленный вывод не дают прибыли
4. Guards: deadline, ExcessiveInput, SlippageTooHigh, InsufficientShares
5. Неудачная операция оставляет ledger без изменений
"""

import pytest

from src.collaborators import POOL_ACCOUNT, InMemoryAssetBank, ManualClock
from src.core.domain.errors import (
    DeadlinePassed,
    ExcessiveInput,
    InsufficientShares,
    MinimumLiquidity,
    SlippageTooHigh,
    ZeroAmount,
)
from src.core.domain.events import LiquidityAdded, LiquidityRemoved
from src.core.domain.pool_state import Asset, PoolLifecycle
from src.pool import Pool, PoolConfig

NOW = 1_000
DEADLINE = 2_000
PARTIES = ("alice", "bob", "carol")
START_BALANCE = 1_000_000


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def clock():
    return ManualClock(start=NOW)


@pytest.fixture
def banks():
    """BASE/QUOTE банки с балансами участников."""
    result = {Asset.BASE: InMemoryAssetBank("BASE"), Asset.QUOTE: InMemoryAssetBank("QUOTE")}
    for bank in result.values():
        for party in PARTIES:
            bank.mint(party, START_BALANCE)
    return result


@pytest.fixture
def pool(clock, banks):
    return Pool(clock=clock, transfers=banks, config=PoolConfig(minimum_liquidity=10))


@pytest.fixture
def funded_pool(pool):
    """Пул после bootstrap 100/100 от alice."""
    pool.deposit("alice", desired_quote=100, min_shares=100, max_base=100, deadline=DEADLINE)
    return pool


@pytest.fixture
def skewed_pool(funded_pool):
    """Пул 91 BASE / 110 QUOTE / 100 shares (после swap 10 QUOTE → 9 BASE)."""
    funded_pool.sell_quote("carol", amount_in=10, min_base_out=9, deadline=DEADLINE)
    assert funded_pool.reserves() == (91, 110)
    return funded_pool


# =============================================================================
# BOOTSTRAP
# =============================================================================


class TestBootstrapDeposit:

    def test_bootstrap_one_to_one(self, pool, banks):
        minted = pool.deposit("alice", desired_quote=100, min_shares=100, max_base=100, deadline=DEADLINE)

        assert minted == 100
        assert pool.reserves() == (100, 100)
        assert pool.total_shares() == 100
        assert pool.share_balance_of("alice") == 100
        assert pool.lifecycle == PoolLifecycle.FUNDED
        assert banks[Asset.BASE].balance_of("alice") == START_BALANCE - 100
        assert banks[Asset.QUOTE].balance_of(POOL_ACCOUNT) == 100

    def test_bootstrap_zero_amount(self, pool):
        with pytest.raises(ZeroAmount):
            pool.deposit("alice", desired_quote=0, min_shares=0, max_base=100, deadline=DEADLINE)
        assert pool.reserves() == (0, 0)
        assert pool.total_shares() == 0

    def test_bootstrap_below_minimum(self, pool):
        with pytest.raises(MinimumLiquidity):
            pool.deposit("alice", desired_quote=9, min_shares=0, max_base=100, deadline=DEADLINE)
        assert pool.reserves() == (0, 0)

    def test_bootstrap_excessive_base(self, pool):
        with pytest.raises(ExcessiveInput):
            pool.deposit("alice", desired_quote=100, min_shares=0, max_base=99, deadline=DEADLINE)
        assert pool.reserves() == (0, 0)

    def test_bootstrap_min_shares(self, pool):
        with pytest.raises(SlippageTooHigh):
            pool.deposit("alice", desired_quote=100, min_shares=101, max_base=100, deadline=DEADLINE)
        assert pool.total_shares() == 0

    def test_event_recorded(self, funded_pool):
        assert funded_pool.events() == [
            LiquidityAdded(party="alice", base_deposited=100, quote_deposited=100, shares_minted=100)
        ]


# =============================================================================
# SUBSEQUENT DEPOSITS
# =============================================================================


class TestProportionalDeposit:

    def test_proportional_shares(self, skewed_pool):
        base_before, quote_before = skewed_pool.reserves()
        total_before = skewed_pool.total_shares()

        minted = skewed_pool.deposit("bob", desired_quote=50, min_shares=0, max_base=1_000, deadline=DEADLINE)

        # floor(50 * 100 / 110) = 45, floor(50 * 91 / 110) = 41
        assert minted == 45
        assert minted == (50 * total_before) // quote_before
        assert skewed_pool.reserves() == (base_before + 41, quote_before + 50)
        assert skewed_pool.total_shares() == 145
        assert skewed_pool.share_balance_of("bob") == 45

    def test_preview_matches_deposit(self, skewed_pool):
        preview = skewed_pool.preview_deposit(50)
        assert preview.is_bootstrap is False
        minted = skewed_pool.deposit("bob", desired_quote=50, min_shares=0, max_base=1_000, deadline=DEADLINE)
        assert minted == preview.minted_shares
        assert preview.required_base == 41

    def test_excessive_base(self, skewed_pool):
        with pytest.raises(ExcessiveInput, match="max_base"):
            skewed_pool.deposit("bob", desired_quote=50, min_shares=0, max_base=40, deadline=DEADLINE)
        assert skewed_pool.reserves() == (91, 110)

    def test_min_shares_slippage(self, skewed_pool):
        with pytest.raises(SlippageTooHigh, match="min_shares"):
            skewed_pool.deposit("bob", desired_quote=50, min_shares=46, max_base=1_000, deadline=DEADLINE)
        assert skewed_pool.total_shares() == 100

    def test_zero_share_deposit_rejected(self, skewed_pool):
        """floor(1 * 100 / 110) = 0 → депозит отклоняется."""
        with pytest.raises(SlippageTooHigh, match="zero shares"):
            skewed_pool.deposit("bob", desired_quote=1, min_shares=0, max_base=1_000, deadline=DEADLINE)

    def test_deadline_passed(self, funded_pool, clock):
        clock.set(DEADLINE + 1)
        with pytest.raises(DeadlinePassed):
            funded_pool.deposit("bob", desired_quote=50, min_shares=0, max_base=1_000, deadline=DEADLINE)
        assert funded_pool.reserves() == (100, 100)


# =============================================================================
# WITHDRAW
# =============================================================================


class TestWithdraw:

    def test_partial_withdraw(self, funded_pool, banks):
        base_out, quote_out = funded_pool.withdraw(
            "alice", shares_to_burn=40, min_base=40, min_quote=40, deadline=DEADLINE
        )

        assert (base_out, quote_out) == (40, 40)
        assert funded_pool.reserves() == (60, 60)
        assert funded_pool.total_shares() == 60
        assert banks[Asset.QUOTE].balance_of("alice") == START_BALANCE - 100 + 40
        assert funded_pool.events()[-1] == LiquidityRemoved(
            party="alice", base_withdrawn=40, quote_withdrawn=40, shares_burned=40
        )

    def test_full_drain_returns_to_empty(self, funded_pool):
        funded_pool.withdraw("alice", shares_to_burn=100, min_base=0, min_quote=0, deadline=DEADLINE)

        assert funded_pool.reserves() == (0, 0)
        assert funded_pool.total_shares() == 0
        assert funded_pool.lifecycle == PoolLifecycle.EMPTY

        # Пул не уничтожается: новый bootstrap
        minted = funded_pool.deposit("bob", desired_quote=20, min_shares=0, max_base=20, deadline=DEADLINE)
        assert minted == 20

    def test_insufficient_shares(self, funded_pool):
        with pytest.raises(InsufficientShares):
            funded_pool.withdraw("alice", shares_to_burn=101, min_base=0, min_quote=0, deadline=DEADLINE)
        assert funded_pool.reserves() == (100, 100)
        assert funded_pool.share_balance_of("alice") == 100

    def test_preview_above_supply(self, funded_pool):
        """Превью не обещает выплату больше резервов."""
        with pytest.raises(InsufficientShares):
            funded_pool.preview_withdraw(1_000)
        assert funded_pool.preview_withdraw(100).base_out == 100

    def test_withdraw_by_non_holder(self, funded_pool):
        with pytest.raises(InsufficientShares):
            funded_pool.withdraw("bob", shares_to_burn=1, min_base=0, min_quote=0, deadline=DEADLINE)

    def test_zero_shares(self, funded_pool):
        with pytest.raises(ZeroAmount):
            funded_pool.withdraw("alice", shares_to_burn=0, min_base=0, min_quote=0, deadline=DEADLINE)

    def test_min_quote_slippage(self, funded_pool):
        with pytest.raises(SlippageTooHigh, match="min_quote"):
            funded_pool.withdraw("alice", shares_to_burn=10, min_base=10, min_quote=11, deadline=DEADLINE)
        assert funded_pool.reserves() == (100, 100)

    def test_deadline_passed(self, funded_pool, clock):
        clock.set(DEADLINE + 1)
        with pytest.raises(DeadlinePassed):
            funded_pool.withdraw("alice", shares_to_burn=10, min_base=0, min_quote=0, deadline=DEADLINE)
        assert funded_pool.total_shares() == 100


# =============================================================================
# ROUND TRIP
# =============================================================================


def test_deposit_then_withdraw_never_gains(skewed_pool):
    """Депозит Q QUOTE и вывод всех долей возвращает <= Q и <= required_base."""
    preview = skewed_pool.preview_deposit(50)
    minted = skewed_pool.deposit("bob", desired_quote=50, min_shares=0, max_base=1_000, deadline=DEADLINE)

    base_out, quote_out = skewed_pool.withdraw(
        "bob", shares_to_burn=minted, min_base=0, min_quote=0, deadline=DEADLINE
    )

    # floor(132 * 45 / 145) = 40, floor(160 * 45 / 145) = 49
    assert (base_out, quote_out) == (40, 49)
    assert quote_out <= 50
    assert base_out <= preview.required_base
    assert skewed_pool.share_balance_of("bob") == 0
