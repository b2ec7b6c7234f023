from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from .config import Settings, load_settings
from .decoder import decode_notes
from .errors import ExecutionError, LedgerError
from .ledger import LedgerClient
from .note import Note
from .state import IDLE, LOADING, OperationState
from .templates import (
    all_notes_script,
    create_note_transaction,
    delete_note_transaction,
    delete_notepad_transaction,
)

logger = logging.getLogger(__name__)

Listener = Callable[[], None]

_UNSET = object()


class NoteStore:
    """
    Notes of the signed-in account, kept on the ledger.

    All state lives on the event loop that runs the operations. The only work
    done elsewhere is the blocking wait for a transaction to be sealed, which
    runs in the loop's default executor.

    Operations are ignored while another one is in flight, and silently
    ignored when nobody is signed in.
    """

    def __init__(self, ledger: LedgerClient, settings: Settings | None = None) -> None:
        self.ledger = ledger
        self.settings = settings or load_settings()
        self._state: OperationState = IDLE
        self._notes: list[Note] | None = None
        self._listeners: list[Listener] = []
        # Bumped on sign-out; results of older operations are discarded
        self._generation = 0

    @classmethod
    async def open(cls, ledger: LedgerClient, settings: Settings | None = None) -> NoteStore:
        """
        Build a store and load the signed-in account's notes right away.
        """
        store = cls(ledger, settings)
        await store.refresh()
        return store

    # Observable surface

    @property
    def state(self) -> OperationState:
        return self._state

    @property
    def notes(self) -> tuple[Note, ...] | None:
        return None if self._notes is None else tuple(self._notes)

    @property
    def has_notepad(self) -> bool:
        return self._notes is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Operations

    async def refresh(self) -> None:
        address = self._ready("refresh")
        if address is None:
            return
        await self._query_notes(address)

    async def create_note(self, title: str, body: str) -> None:
        address = self._ready("create_note")
        if address is None:
            return
        script = create_note_transaction(self.settings.notepad_manager_address, title, body)
        await self._mutate("create_note", address, script, self._requery)

    async def delete_note(self, note_id: int) -> None:
        address = self._ready("delete_note")
        if address is None:
            return
        if not any(note.id == note_id for note in self._notes or ()):
            logger.debug(f"delete_note ignored: note {note_id} is not loaded")
            return
        script = delete_note_transaction(self.settings.notepad_manager_address, note_id)
        await self._mutate("delete_note", address, script, self._requery)

    async def delete_note_at(self, index: int | None) -> None:
        if index is None or self._notes is None or not 0 <= index < len(self._notes):
            logger.debug(f"delete_note_at ignored: no note at index {index}")
            return
        await self.delete_note(self._notes[index].id)

    async def delete_notepad(self) -> None:
        address = self._ready("delete_notepad")
        if address is None:
            return
        script = delete_notepad_transaction(self.settings.notepad_manager_address)
        await self._mutate("delete_notepad", address, script, self._clear_notes)

    def acknowledge_error(self) -> None:
        if self._state.is_failed:
            self._update(state=IDLE)

    def sign_out(self) -> None:
        self.ledger.sign_out()
        self._generation += 1
        if self._notes is not None:
            self._update(notes=None)

    # Internals

    def _ready(self, operation: str) -> str | None:
        identity = self.ledger.current_identity()
        address = identity.address if identity is not None else None
        if not address:
            logger.debug(f"{operation} ignored: not signed in")
            return None
        if self._state.is_loading:
            logger.debug(f"{operation} ignored: another operation is in flight")
            return None
        return address

    def _is_stale(self, generation: int, address: str) -> bool:
        identity = self.ledger.current_identity()
        current = identity.address if identity is not None else None
        return generation != self._generation or current != address

    def _drop_stale(self, operation: str, address: str) -> None:
        logger.info(f"{operation} for {address} finished after sign-out; result dropped")
        self._update(state=IDLE)

    async def _query_notes(self, address: str) -> None:
        script = all_notes_script(self.settings.notepad_manager_address, address)
        generation = self._generation
        self._update(state=LOADING)

        try:
            value = await self.ledger.submit_query(script)
        except LedgerError as e:
            error: Exception | None = e
        except Exception as e:
            logger.error(f"Unexpected error querying notes: {e}", exc_info=True)
            error = e
        else:
            error = None

        if self._is_stale(generation, address):
            self._drop_stale("query", address)
            return
        if error is not None:
            self._fail("query", error)
            return

        notes = decode_notes(value)
        count = "no" if notes is None else len(notes)
        logger.info(f"Loaded {count} notes for {address}")
        self._update(state=IDLE, notes=notes)

    async def _mutate(
        self,
        operation: str,
        address: str,
        script: str,
        on_sealed: Callable[[str], Awaitable[None]],
    ) -> None:
        generation = self._generation
        self._update(state=LOADING)

        try:
            transaction_id = await self.ledger.submit_transaction(script, self.settings.gas_limit)
        except LedgerError as e:
            self._fail(operation, e)
            return
        except Exception as e:
            logger.error(f"Unexpected error submitting {operation}: {e}", exc_info=True)
            self._fail(operation, e)
            return

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self.ledger.await_sealed, transaction_id)
        except LedgerError as e:
            error: Exception | None = e
        except Exception as e:
            logger.error(f"Unexpected error awaiting {transaction_id}: {e}", exc_info=True)
            error = e
        else:
            error = ExecutionError(result.error_message) if result.error_message else None

        if self._is_stale(generation, address):
            self._drop_stale(operation, address)
            return
        if error is not None:
            self._fail(operation, error)
            return

        await on_sealed(address)

    async def _requery(self, address: str) -> None:
        await self._query_notes(address)

    async def _clear_notes(self, address: str) -> None:
        logger.info(f"Notepad of {address} deleted")
        self._update(state=IDLE, notes=None)

    def _fail(self, operation: str, error: Exception) -> None:
        message = str(error) or type(error).__name__
        logger.warning(f"{operation} failed: {message}")
        self._update(state=OperationState.failed(message))

    def _update(self, state: OperationState | None = None, notes: object = _UNSET) -> None:
        if state is not None:
            self._state = state
        if notes is not _UNSET:
            self._notes = notes
        for listener in list(self._listeners):
            # A broken observer must not leave the store stuck in flight
            try:
                listener()
            except Exception as e:
                logger.error(f"Listener {listener!r} failed: {e}", exc_info=True)
