"""
Тесты для Rate Math — fixed-point расчёты constant-product пула

Проверяемые свойства:
1. Формулы exact-input / exact-output / quote_proportional
2. Направление округления всегда в пользу пула
3. Консистентность: swap_input_from_output(swap_output_from_input(x)) <= x
4. Ошибки ZeroAmount / InsufficientLiquidity
"""

import pytest

from src.core.domain.errors import InsufficientLiquidity, InsufficientShares, ZeroAmount
from src.core.math.rate_math import (
    Fee,
    payout_for_shares,
    quote_proportional,
    shares_for_deposit,
    spot_price,
    swap_input_from_output,
    swap_output_from_input,
)

FEE = Fee(997, 1000)
NO_FEE = Fee(1000, 1000)

# Набор состояний пула (reserve_in, reserve_out)
POOL_STATES = [
    (100, 100),
    (1_000, 37),
    (37, 1_000),
    (10**12, 10**9),
    (5_000_003, 4_999_999),
]


# =============================================================================
# ТЕСТЫ: quote_proportional
# =============================================================================


class TestQuoteProportional:

    def test_exact_ratio(self):
        assert quote_proportional(50, 100, 200) == 100

    def test_rounds_down(self):
        # 50 * 91 / 110 = 41.36
        assert quote_proportional(50, 110, 91) == 41

    def test_zero_reserve_known(self):
        with pytest.raises(InsufficientLiquidity):
            quote_proportional(10, 0, 100)

    def test_shares_for_deposit(self):
        # floor(50 * 100 / 110) = 45
        assert shares_for_deposit(50, 110, 100) == 45

    def test_payout_for_shares(self):
        # floor(132 * 45 / 145) = 40
        assert payout_for_shares(45, 132, 145) == 40
        assert payout_for_shares(145, 132, 145) == 132

    def test_payout_without_shares(self):
        with pytest.raises(InsufficientLiquidity, match="no shares"):
            payout_for_shares(1, 100, 0)

    def test_payout_above_supply(self):
        with pytest.raises(InsufficientShares, match="exceed total_shares"):
            payout_for_shares(1_000, 100, 100)


# =============================================================================
# ТЕСТЫ: swap_output_from_input
# =============================================================================


class TestSwapOutputFromInput:

    def test_reference_scenario(self):
        """100/100, вход 10, комиссия 997/1000 → 9."""
        expected = (10 * 997 * 100) // (100 * 1000 + 10 * 997)
        assert expected == 9
        assert swap_output_from_input(10, 100, 100, FEE) == 9

    def test_fee_reduces_output(self):
        for reserve_in, reserve_out in POOL_STATES:
            amount_in = max(reserve_in // 10, 1)
            with_fee = swap_output_from_input(amount_in, reserve_in, reserve_out, FEE)
            without_fee = swap_output_from_input(amount_in, reserve_in, reserve_out, NO_FEE)
            assert with_fee <= without_fee

    def test_never_drains_reserve(self):
        amount_out = swap_output_from_input(10**18, 100, 100, FEE)
        assert amount_out < 100

    def test_product_strictly_grows_with_fee(self):
        for reserve_in, reserve_out in POOL_STATES:
            amount_in = max(reserve_in // 7, 1)
            amount_out = swap_output_from_input(amount_in, reserve_in, reserve_out, FEE)
            assert (reserve_in + amount_in) * (reserve_out - amount_out) > reserve_in * reserve_out

    def test_zero_amount(self):
        with pytest.raises(ZeroAmount):
            swap_output_from_input(0, 100, 100, FEE)

    def test_empty_reserve(self):
        with pytest.raises(InsufficientLiquidity):
            swap_output_from_input(10, 0, 100, FEE)
        with pytest.raises(InsufficientLiquidity):
            swap_output_from_input(10, 100, 0, FEE)

    def test_invalid_fee(self):
        with pytest.raises(ValueError, match="fee"):
            swap_output_from_input(10, 100, 100, Fee(1001, 1000))
        with pytest.raises(ValueError, match="fee"):
            swap_output_from_input(10, 100, 100, Fee(0, 1000))


# =============================================================================
# ТЕСТЫ: swap_input_from_output
# =============================================================================


class TestSwapInputFromOutput:

    def test_reference_scenario(self):
        """100/100, выход 9: ceil(900000 / 90727) = 10."""
        assert swap_input_from_output(9, 100, 100, FEE) == 10

    def test_rounds_up(self):
        """Без комиссии: ceil(100 * 1 / 99) = 2, а не 1."""
        assert swap_input_from_output(1, 100, 100, NO_FEE) == 2

    def test_product_strictly_grows_with_fee(self):
        for reserve_in, reserve_out in POOL_STATES:
            amount_out = max(reserve_out // 5, 1)
            amount_in = swap_input_from_output(amount_out, reserve_in, reserve_out, FEE)
            assert (reserve_in + amount_in) * (reserve_out - amount_out) > reserve_in * reserve_out

    def test_drain_rejected(self):
        with pytest.raises(InsufficientLiquidity, match="drain"):
            swap_input_from_output(100, 100, 100, FEE)
        with pytest.raises(InsufficientLiquidity):
            swap_input_from_output(150, 100, 100, FEE)

    def test_zero_amount(self):
        with pytest.raises(ZeroAmount):
            swap_input_from_output(0, 100, 100, FEE)


# =============================================================================
# ТЕСТЫ: Консистентность exact-input / exact-output
# =============================================================================


class TestExactInputOutputConsistency:

    @pytest.mark.parametrize("reserve_in,reserve_out", POOL_STATES)
    def test_round_trip_conservative(self, reserve_in, reserve_out):
        """Вход, нужный для полученного выхода, не больше исходного входа."""
        for amount_in in (1_000, 12_345, reserve_in // 3 + 1, reserve_in * 2):
            amount_out = swap_output_from_input(amount_in, reserve_in, reserve_out, FEE)
            if amount_out == 0:
                continue
            assert swap_input_from_output(amount_out, reserve_in, reserve_out, FEE) <= amount_in

    def test_spot_price(self):
        # floor(10 * 997 * 100 / (100 * 1000 + 10 * 997)) = 9
        assert spot_price(10, 100, 100, FEE) == 9
