"""TransactionScope — all-or-nothing выполнение операции пула.

Схема операции:
    begin (снапшот всех участников)
      → мутация ledger (credit/debit/mint/burn)
      → внешние переводы (могут выполнить код получателя и повторно войти в пул)
      → verify (инварианты)
    commit, либо restore всех снапшотов и повторный raise

Scopes вкладываются: откат внутренней (reentrant) операции восстанавливает
только её снапшот; откат внешней восстанавливает всё, включая эффекты
завершившихся внутренних операций.
"""

import logging
from enum import Enum
from typing import Any, Callable, Sequence

from src.collaborators import AssetTransfer, Transactional
from src.core.domain.errors import TransferFailed
from src.core.domain.pool_state import Asset

logger = logging.getLogger(__name__)


class TransferDirection(str, Enum):
    IN = "in"
    OUT = "out"


class TransactionScope:
    """Контекстный менеджер отката для одной операции."""

    def __init__(
        self,
        label: str,
        participants: Sequence[Transactional],
        verify: Callable[[], None] | None = None,
    ):
        self.label = label
        self._participants = list(participants)
        self._verify = verify
        self._snapshots: list[tuple[Transactional, Any]] = []

    def __enter__(self) -> "TransactionScope":
        self._snapshots = [(p, p.snapshot()) for p in self._participants]
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            if self._verify is None:
                return False
            try:
                self._verify()
            except Exception as verify_exc:
                self._rollback(verify_exc)
                raise
            return False

        self._rollback(exc)
        return False

    def _rollback(self, cause: BaseException) -> None:
        for participant, snapshot in reversed(self._snapshots):
            participant.restore(snapshot)
        logger.warning("%s rolled back: %s: %s", self.label, type(cause).__name__, cause)


def request_transfer(
    transfer: AssetTransfer,
    direction: TransferDirection,
    asset: Asset,
    account: str,
    amount: int,
) -> None:
    """Запрос внешнего перевода. Нулевая сумма не переводится.

    Raises:
        TransferFailed: Если коллаборатор вернул False или поднял исключение
    """
    if amount == 0:
        return

    try:
        if direction is TransferDirection.IN:
            ok = transfer.transfer_in(account, amount)
        else:
            ok = transfer.transfer_out(account, amount)
    except Exception as exc:
        raise TransferFailed(
            f"transfer {direction.value} of {amount} {asset.value} for {account!r} raised: {exc}"
        ) from exc

    if not ok:
        raise TransferFailed(
            f"transfer {direction.value} of {amount} {asset.value} for {account!r} failed"
        )
