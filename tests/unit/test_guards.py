"""Unit тесты для Guard Layer.

Coverage:
- Deadline (inclusive / exclusive)
- Zero-amount для каждой пользовательской суммы
- Bounds (MIN / MAX) и маппинг на исключения
- Порядок проверок: deadline раньше zero-amount
"""

import pytest

from src.collaborators import ManualClock
from src.core.domain.errors import (
    DeadlinePassed,
    ExcessiveInput,
    OutputTooLow,
    SlippageTooHigh,
    ZeroAmount,
)
from src.gatekeeper.guards import Bound, BoundKind, GuardConfig, OperationGuard


@pytest.fixture
def clock():
    """Логическое время 100."""
    return ManualClock(start=100)


@pytest.fixture
def guard(clock):
    return OperationGuard(clock)


# =============================================================================
# DEADLINE
# =============================================================================


def test_deadline_in_future_passes(guard):
    result = guard.check_preconditions(deadline=150, amounts={"amount_in": 10})

    assert result.allowed is True
    assert result.block_reason == ""
    assert result.error is None
    assert result.details == "PASS"


def test_deadline_equal_to_now_passes(guard):
    result = guard.check_preconditions(deadline=100, amounts={"amount_in": 10})
    assert result.allowed is True


def test_deadline_passed_blocks(guard):
    result = guard.check_preconditions(deadline=99, amounts={"amount_in": 10})

    assert result.allowed is False
    assert result.block_reason == "deadline_passed"
    assert result.error is DeadlinePassed
    assert "now=100" in result.details


def test_deadline_exclusive_config(clock):
    guard = OperationGuard(clock, GuardConfig(deadline_inclusive=False))
    result = guard.check_preconditions(deadline=100, amounts={"amount_in": 10})
    assert result.error is DeadlinePassed


def test_deadline_checked_before_zero_amount(guard):
    """Истёкший deadline с нулевой суммой → DeadlinePassed, не ZeroAmount."""
    result = guard.check_preconditions(deadline=1, amounts={"amount_in": 0})
    assert result.error is DeadlinePassed


def test_deadline_follows_clock(clock, guard):
    assert guard.check_preconditions(deadline=120, amounts={}).allowed is True
    clock.advance(21)
    assert guard.check_preconditions(deadline=120, amounts={}).allowed is False


# =============================================================================
# ZERO AMOUNT
# =============================================================================


def test_zero_amount_blocks(guard):
    result = guard.check_preconditions(deadline=150, amounts={"desired_quote": 0})

    assert result.allowed is False
    assert result.error is ZeroAmount
    assert "desired_quote" in result.details


def test_negative_amount_is_programming_error(guard):
    with pytest.raises(ValueError, match="non-negative"):
        guard.check_preconditions(deadline=150, amounts={"amount_in": -5})


# =============================================================================
# BOUNDS
# =============================================================================


def test_bounds_pass(guard):
    result = guard.check_bounds(
        [
            Bound("max_base", 100, 100, BoundKind.MAX, ExcessiveInput),
            Bound("min_shares", 100, 90, BoundKind.MIN, SlippageTooHigh),
        ]
    )
    assert result.allowed is True


def test_first_violated_bound_blocks(guard):
    result = guard.check_bounds(
        [
            Bound("max_base", 101, 100, BoundKind.MAX, ExcessiveInput),
            Bound("min_shares", 1, 90, BoundKind.MIN, SlippageTooHigh),
        ]
    )

    assert result.allowed is False
    assert result.block_reason == "max_base_violated"
    assert result.error is ExcessiveInput
    assert "computed 101 must be <= 100" in result.details


# =============================================================================
# ENFORCE
# =============================================================================


def test_enforce_raises_mapped_error(guard):
    result = guard.check_bounds([Bound("min_amount_out", 9, 10, BoundKind.MIN, OutputTooLow)])
    with pytest.raises(OutputTooLow, match="min_amount_out"):
        OperationGuard.enforce(result)


def test_enforce_pass_is_noop(guard):
    OperationGuard.enforce(guard.check_bounds([]))
