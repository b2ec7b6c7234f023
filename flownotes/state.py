from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationState:
    phase: Phase = Phase.IDLE
    error: str | None = None

    @classmethod
    def idle(cls) -> OperationState:
        return cls(Phase.IDLE)

    @classmethod
    def loading(cls) -> OperationState:
        return cls(Phase.LOADING)

    @classmethod
    def failed(cls, message: str) -> OperationState:
        return cls(Phase.FAILED, message)

    @property
    def is_idle(self) -> bool:
        return self.phase is Phase.IDLE

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def is_failed(self) -> bool:
        return self.phase is Phase.FAILED

    @property
    def error_message(self) -> str | None:
        # Only meaningful while failed
        return self.error if self.is_failed else None


IDLE = OperationState.idle()
LOADING = OperationState.loading()
