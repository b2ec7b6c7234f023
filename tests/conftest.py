from __future__ import annotations

import threading

import pytest

from flownotes.cadence import Array, Field, Optional, Primitive, Struct
from flownotes.config import Settings
from flownotes.ledger import Identity, TransactionResult


USER_ADDRESS = "0x01cf0e2f2f715450"


def note_struct(note_id, title, body) -> Struct:
    return Struct(
        type_id="A.9bde7238c9c39e97.NotepadManagerV1.NoteDTO",
        fields=[
            Field("id", Primitive("UInt64", str(note_id))),
            Field("title", Primitive("String", title)),
            Field("body", Primitive("String", body)),
        ],
    )


def notes_value(*notes: tuple) -> Optional:
    return Optional(Array([note_struct(*n) for n in notes]))


class FakeLedger:
    def __init__(self, address: str | None = USER_ADDRESS) -> None:
        self.identity = Identity(address) if address else None
        self.queries: list[str] = []
        self.transactions: list[tuple[str, int]] = []
        self.query_results: list = [Optional(None)]
        self.query_error: Exception | None = None
        self.submit_error: Exception | None = None
        self.seal_result = TransactionResult(status="Sealed")
        self.seal_error: Exception | None = None
        self.seal_threads: list[int] = []
        self.signed_out = False

    def current_identity(self) -> Identity | None:
        return self.identity

    async def authenticate(self) -> Identity | None:
        self.identity = Identity(USER_ADDRESS)
        return self.identity

    async def submit_query(self, script: str):
        self.queries.append(script)
        if self.query_error is not None:
            raise self.query_error
        # Last result repeats once the queue is exhausted
        if len(self.query_results) > 1:
            return self.query_results.pop(0)
        return self.query_results[0]

    async def submit_transaction(self, script: str, gas_limit: int) -> str:
        self.transactions.append((script, gas_limit))
        if self.submit_error is not None:
            raise self.submit_error
        return f"tx-{len(self.transactions)}"

    def await_sealed(self, transaction_id: str) -> TransactionResult:
        self.seal_threads.append(threading.get_ident())
        if self.seal_error is not None:
            raise self.seal_error
        return self.seal_result

    def sign_out(self) -> None:
        self.signed_out = True
        self.identity = None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        access_node_url="https://rest-testnet.onflow.org",
        notepad_manager_address="0x9bde7238c9c39e97",
        gas_limit=1000,
        poll_interval=0.0,
        seal_timeout=None,
    )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def anonymous_ledger() -> FakeLedger:
    return FakeLedger(address=None)

