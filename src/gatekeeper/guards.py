"""Guard Layer — проверки, предшествующие любой мутации ledger

Порядок проверок для каждой публичной операции:
1. Deadline: DeadlinePassed, если текущее логическое время > deadline
2. Zero-amount: ZeroAmount для каждой пользовательской суммы
3. Bounds операции: min_shares, max_base, min_base/min_quote,
   min_amount_out, max_amount_in

Шаги 1-2 выполняются до расчётов (check_preconditions), шаг 3 — после
расчёта сумм через Rate Math, но до мутации ledger (check_bounds).

Каждая проверка возвращает GuardResult с решением о допуске;
enforce() превращает блокировку в исключение из таксономии PoolError.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

from src.collaborators import Clock
from src.core.domain.errors import DeadlinePassed, PoolError, ZeroAmount
from src.core.math.numerical_safeguards import require_int

logger = logging.getLogger(__name__)


# =============================================================================
# BOUNDS
# =============================================================================


class BoundKind(str, Enum):
    """Тип границы: значение не ниже минимума или не выше максимума."""

    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class Bound:
    """Граница, заданная вызывающим, для вычисленного значения."""

    name: str
    value: int
    limit: int
    kind: BoundKind
    error: type[PoolError]

    def is_satisfied(self) -> bool:
        if self.kind is BoundKind.MIN:
            return self.value >= self.limit
        return self.value <= self.limit


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class GuardResult:
    """Результат проверки guard."""

    allowed: bool
    block_reason: str

    # Класс исключения для блокировки (None если allowed)
    error: type[PoolError] | None

    # Детали
    details: str


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class GuardConfig:
    """Конфигурация Guard Layer.

    deadline_inclusive: операция с now == deadline допускается
    """

    deadline_inclusive: bool = True


# =============================================================================
# GUARD
# =============================================================================


class OperationGuard:
    """Guard для публичных операций пула.

    Stateless относительно пула: читает только логическое время из Clock.
    """

    def __init__(self, clock: Clock, config: GuardConfig | None = None):
        """
        Args:
            clock: источник текущего логического времени
            config: конфигурация guard (опционально, используется default)
        """
        self.clock = clock
        self.config = config or GuardConfig()

    def check_preconditions(self, deadline: int, amounts: Mapping[str, int]) -> GuardResult:
        """Шаги 1-2: deadline и zero-amount.

        Args:
            deadline: deadline операции (логическое время)
            amounts: пользовательские суммы по имени параметра

        Returns:
            GuardResult
        """
        require_int("deadline", deadline)
        now = self.clock.now()

        # 1. Deadline
        expired = now > deadline if self.config.deadline_inclusive else now >= deadline
        if expired:
            return GuardResult(
                allowed=False,
                block_reason="deadline_passed",
                error=DeadlinePassed,
                details=f"now={now} is past deadline={deadline}",
            )

        # 2. Zero amounts
        for name, amount in amounts.items():
            require_int(name, amount)
            if amount < 0:
                raise ValueError(f"{name} must be non-negative, got {amount}")
            if amount == 0:
                return GuardResult(
                    allowed=False,
                    block_reason="zero_amount",
                    error=ZeroAmount,
                    details=f"{name} must be non-zero",
                )

        return GuardResult(allowed=True, block_reason="", error=None, details="PASS")

    def check_bounds(self, bounds: Sequence[Bound]) -> GuardResult:
        """Шаг 3: границы операции. Первая нарушенная граница блокирует."""
        for bound in bounds:
            if not bound.is_satisfied():
                relation = ">=" if bound.kind is BoundKind.MIN else "<="
                return GuardResult(
                    allowed=False,
                    block_reason=f"{bound.name}_violated",
                    error=bound.error,
                    details=(
                        f"{bound.name}: computed {bound.value} must be {relation} {bound.limit}"
                    ),
                )
        return GuardResult(allowed=True, block_reason="", error=None, details="PASS")

    @staticmethod
    def enforce(result: GuardResult) -> None:
        """Поднять исключение, если guard заблокировал операцию."""
        if result.allowed:
            return
        logger.info("guard blocked operation: %s (%s)", result.block_reason, result.details)
        error = result.error or PoolError
        raise error(result.details)
