"""Конфигурация пула ликвидности.

Политические параметры (комиссия, минимальная ликвидность bootstrap,
единица котировки цены, rebate) задаются конфигурацией, а не константами.
"""

from dataclasses import dataclass, field
from typing import Final

from src.core.domain.pool_state import Asset, FeeRate
from src.core.math.numerical_safeguards import validate_non_negative, validate_positive
from src.core.math.rate_math import Fee

# Default fee multiplier: 997/1000 (комиссия 0.3%)
DEFAULT_FEE_NUMERATOR: Final[int] = 997
DEFAULT_FEE_DENOMINATOR: Final[int] = 1000

# Минимальный bootstrap-депозит QUOTE (защита от вырожденных micro-pools)
DEFAULT_MINIMUM_LIQUIDITY: Final[int] = 1_000

# Единица для price getters (10**6 минимальных единиц)
DEFAULT_PRICE_UNIT: Final[int] = 1_000_000


@dataclass(frozen=True)
class RebateConfig:
    """Конфигурация rebate из бонусного счёта.

    Каждый every_n_swaps-й swap участника получает amount единиц asset,
    если бонусный счёт может это покрыть.
    """

    enabled: bool = False
    every_n_swaps: int = 10
    amount: int = 0
    asset: Asset = Asset.QUOTE

    def __post_init__(self):
        validate_positive("every_n_swaps", self.every_n_swaps)
        validate_non_negative("amount", self.amount)
        if self.enabled and self.amount == 0:
            raise ValueError("enabled rebate requires a positive amount")


@dataclass(frozen=True)
class PoolConfig:
    """Конфигурация пула.

    Args:
        fee_numerator / fee_denominator: множитель комиссии (0 < num <= den)
        minimum_liquidity: минимальный bootstrap-депозит QUOTE
        price_unit: сколько единиц входа котируют price getters
        rebate: политика rebate (по умолчанию выключена)
    """

    fee_numerator: int = DEFAULT_FEE_NUMERATOR
    fee_denominator: int = DEFAULT_FEE_DENOMINATOR
    minimum_liquidity: int = DEFAULT_MINIMUM_LIQUIDITY
    price_unit: int = DEFAULT_PRICE_UNIT
    rebate: RebateConfig = field(default_factory=RebateConfig)

    def __post_init__(self):
        validate_positive("fee_numerator", self.fee_numerator)
        validate_positive("fee_denominator", self.fee_denominator)
        if self.fee_numerator > self.fee_denominator:
            raise ValueError(
                f"fee_numerator {self.fee_numerator} exceeds fee_denominator {self.fee_denominator}"
            )
        validate_positive("minimum_liquidity", self.minimum_liquidity)
        validate_positive("price_unit", self.price_unit)

    @property
    def fee(self) -> Fee:
        return Fee(self.fee_numerator, self.fee_denominator)

    def fee_rate(self) -> FeeRate:
        """Pydantic-представление комиссии для снапшота."""
        return FeeRate(numerator=self.fee_numerator, denominator=self.fee_denominator)
