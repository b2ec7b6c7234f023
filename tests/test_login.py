from __future__ import annotations

import asyncio

from conftest import USER_ADDRESS, FakeLedger

from flownotes.errors import SubmissionError
from flownotes.login import authenticate


def test_authenticate_returns_identity(anonymous_ledger) -> None:
    identity = asyncio.run(authenticate(anonymous_ledger))

    assert identity.address == USER_ADDRESS
    assert anonymous_ledger.current_identity() == identity


def test_authenticate_cancelled() -> None:
    class CancellingLedger(FakeLedger):
        async def authenticate(self):
            return None

    assert asyncio.run(authenticate(CancellingLedger(address=None))) is None


def test_authenticate_failure_is_logged_not_raised(caplog) -> None:
    class FailingLedger(FakeLedger):
        async def authenticate(self):
            raise SubmissionError("wallet unreachable")

    assert asyncio.run(authenticate(FailingLedger(address=None))) is None
    assert "wallet unreachable" in caplog.text
