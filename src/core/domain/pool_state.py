"""
PoolState — Модель персистентного состояния пула

Immutable Pydantic модель, представляющая снапшот пула ликвидности.
Полная совместимость с JSON Schema (src/core/contracts/schema/pool_state.json).

Персистентный layout:
    (reserve_base, reserve_quote, total_shares, fee_numerator, fee_denominator)
    + mapping party → share balance
    + статистика swap (опционально)
    + бонусный счёт rebate (опционально)
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Asset(str, Enum):
    """Торгуемый актив пула."""

    BASE = "BASE"
    QUOTE = "QUOTE"

    @property
    def other(self) -> "Asset":
        """Второй актив пары."""
        return Asset.QUOTE if self is Asset.BASE else Asset.BASE


class PoolLifecycle(str, Enum):
    """
    Стадия жизненного цикла пула.

    EMPTY: резервы и доли равны нулю (создан или полностью выведен)
    FUNDED: bootstrap-депозит выполнен, резервы положительны
    """

    EMPTY = "EMPTY"
    FUNDED = "FUNDED"


# =============================================================================
# NESTED MODELS
# =============================================================================


class FeeRate(BaseModel):
    """
    Множитель комиссии swap как рациональное число.

    997/1000 означает, что в ценообразовании участвует 99.7% входа (комиссия 0.3%).
    """

    numerator: int = Field(..., gt=0, description="Числитель множителя")
    denominator: int = Field(..., gt=0, description="Знаменатель множителя")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_ratio(self) -> "FeeRate":
        """Множитель не может превышать 1."""
        if self.numerator > self.denominator:
            raise ValueError(
                f"fee numerator {self.numerator} exceeds denominator {self.denominator}"
            )
        return self

    @property
    def is_zero_fee(self) -> bool:
        return self.numerator == self.denominator


class PoolStats(BaseModel):
    """Накопленная статистика swap."""

    swap_count: int = Field(default=0, ge=0, description="Число выполненных swap")
    volume_base_in: int = Field(default=0, ge=0, description="Суммарный вход BASE")
    volume_quote_in: int = Field(default=0, ge=0, description="Суммарный вход QUOTE")

    model_config = {"frozen": True}


class BonusState(BaseModel):
    """Бонусный счёт rebate: учтённые балансы и счётчики swap."""

    balance_base: int = Field(default=0, ge=0, description="Бонусный баланс BASE")
    balance_quote: int = Field(default=0, ge=0, description="Бонусный баланс QUOTE")
    swap_counters: dict[str, int] = Field(
        default_factory=dict, description="Счётчики swap с последнего rebate"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_counters(self) -> "BonusState":
        if any(count <= 0 for count in self.swap_counters.values()):
            raise ValueError("swap counters must be positive")
        return self


# =============================================================================
# POOL STATE MODEL
# =============================================================================


class PoolState(BaseModel):
    """
    Снапшот пула ликвидности.

    Immutable модель (frozen=True). Проверяет при создании:
    - total_shares == 0 тогда и только тогда, когда оба резерва равны нулю
    - Сумма балансов долей равна total_shares
    """

    schema_version: str = Field(default="1", pattern="^1$", description="Версия схемы")

    reserve_base: int = Field(..., ge=0, description="Резерв BASE")
    reserve_quote: int = Field(..., ge=0, description="Резерв QUOTE")
    total_shares: int = Field(..., ge=0, description="Выпущенные доли")

    fee: FeeRate = Field(..., description="Множитель комиссии swap")
    share_balances: dict[str, int] = Field(
        default_factory=dict, description="Балансы долей по участникам"
    )
    stats: PoolStats = Field(default_factory=PoolStats, description="Статистика swap")
    bonus: BonusState = Field(default_factory=BonusState, description="Бонусный счёт rebate")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_invariants(self) -> "PoolState":
        empty_reserves = self.reserve_base == 0 and self.reserve_quote == 0
        if (self.total_shares == 0) != empty_reserves:
            raise ValueError(
                "total_shares must be zero iff both reserves are zero "
                f"(base={self.reserve_base}, quote={self.reserve_quote}, shares={self.total_shares})"
            )
        if any(balance <= 0 for balance in self.share_balances.values()):
            raise ValueError("share balances must be positive")
        if sum(self.share_balances.values()) != self.total_shares:
            raise ValueError(
                f"share balances sum {sum(self.share_balances.values())} "
                f"!= total_shares {self.total_shares}"
            )
        return self

    @property
    def lifecycle(self) -> PoolLifecycle:
        return PoolLifecycle.EMPTY if self.total_shares == 0 else PoolLifecycle.FUNDED

    def product(self) -> int:
        """Constant-product k = reserve_base * reserve_quote."""
        return self.reserve_base * self.reserve_quote
