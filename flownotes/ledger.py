from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from .cadence import LedgerValue


SEALED = "Sealed"
EXPIRED = "Expired"


@dataclass(frozen=True)
class Identity:
    address: str | None = None


@dataclass(frozen=True)
class TransactionResult:
    status: str
    error_message: str = ""
    status_code: int = 0
    events: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_sealed(self) -> bool:
        return self.status == SEALED


@runtime_checkable
class Wallet(Protocol):
    """
    Wallet-side identity and signing. Key management lives behind this.
    """

    @property
    def current_user(self) -> Identity | None:
        ...

    async def authenticate(self) -> Identity | None:
        ...

    async def authorize(self, script: str, arguments: list[str], gas_limit: int) -> dict[str, Any]:
        """Return a signed transaction body ready for ``POST /v1/transactions``."""
        ...

    def sign_out(self) -> None:
        ...


@runtime_checkable
class LedgerClient(Protocol):
    def current_identity(self) -> Identity | None:
        ...

    async def authenticate(self) -> Identity | None:
        ...

    async def submit_query(self, script: str) -> LedgerValue:
        ...

    async def submit_transaction(self, script: str, gas_limit: int) -> str:
        ...

    def await_sealed(self, transaction_id: str) -> TransactionResult:
        """Block until the transaction is sealed."""
        ...

    def sign_out(self) -> None:
        ...
