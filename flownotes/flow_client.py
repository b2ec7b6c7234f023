from __future__ import annotations

import base64
import json
import logging
import time

import httpx

from .cadence import LedgerValue, parse_value
from .config import FLOW_ACCESS_NODE_URL, Settings
from .errors import QueryError, SubmissionError
from .ledger import EXPIRED, Identity, TransactionResult, Wallet

logger = logging.getLogger(__name__)


def _error_message(e: httpx.HTTPError) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        response = e.response
        try:
            detail = response.json().get("message")
        except (ValueError, AttributeError):
            detail = None
        return f"HTTP {response.status_code}: {detail or response.text[:200]}"
    return str(e) or type(e).__name__


class FlowLedger:
    """
    Ledger client backed by the Flow Access Node REST API.

    Identity and transaction signing are delegated to the wallet.
    """

    def __init__(
        self,
        wallet: Wallet,
        access_node_url: str | None = None,
        poll_interval: float = 1.0,
        seal_timeout: float | None = None,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.wallet = wallet
        self.base_url = (access_node_url or FLOW_ACCESS_NODE_URL).rstrip("/")
        self.poll_interval = poll_interval
        self.seal_timeout = seal_timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        wallet: Wallet,
        settings: Settings,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
    ) -> FlowLedger:
        return cls(
            wallet,
            access_node_url=settings.access_node_url,
            poll_interval=settings.poll_interval,
            seal_timeout=settings.seal_timeout,
            transport=transport,
        )

    def current_identity(self) -> Identity | None:
        user = self.wallet.current_user
        if user is None or not user.address:
            return None
        return user

    async def authenticate(self) -> Identity | None:
        return await self.wallet.authenticate()

    def sign_out(self) -> None:
        self.wallet.sign_out()

    async def submit_query(self, script: str) -> LedgerValue:
        url = f"{self.base_url}/v1/scripts"
        payload = {
            "script": base64.b64encode(script.encode("utf-8")).decode("ascii"),
            "arguments": [],
        }

        try:
            async with httpx.AsyncClient(timeout=60, transport=self._transport) as client:
                resp = await client.post(url, params={"block_height": "sealed"}, json=payload)
                resp.raise_for_status()
                encoded = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(_error_message(e)) from e
        except ValueError as e:
            raise QueryError("Malformed script response") from e

        try:
            return parse_value(json.loads(base64.b64decode(encoded)))
        except (TypeError, ValueError) as e:
            raise QueryError("Malformed script result") from e

    async def submit_transaction(self, script: str, gas_limit: int) -> str:
        body = await self.wallet.authorize(script, [], gas_limit)
        url = f"{self.base_url}/v1/transactions"

        try:
            async with httpx.AsyncClient(timeout=60, transport=self._transport) as client:
                resp = await client.post(url, json=body)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise SubmissionError(_error_message(e)) from e
        except ValueError as e:
            raise SubmissionError("Malformed transaction response") from e

        transaction_id = data.get("id") if isinstance(data, dict) else None
        if not transaction_id:
            raise SubmissionError("Access node did not return a transaction id")

        logger.info(f"Submitted transaction {transaction_id}")
        return transaction_id

    def await_sealed(self, transaction_id: str) -> TransactionResult:
        """
        Poll the transaction result until it is sealed. Blocking; run it off
        the event loop.
        """
        url = f"{self.base_url}/v1/transaction_results/{transaction_id}"
        deadline = None if self.seal_timeout is None else time.monotonic() + self.seal_timeout
        last_status = None

        with httpx.Client(timeout=60, transport=self._transport) as client:
            while True:
                try:
                    resp = client.get(url)
                    # Freshly submitted transactions may not be indexed yet
                    if resp.status_code != 404:
                        resp.raise_for_status()
                        data = resp.json()
                        result = TransactionResult(
                            status=str(data.get("status", "")),
                            error_message=data.get("error_message") or "",
                            status_code=int(data.get("status_code") or 0),
                            events=data.get("events") or [],
                        )
                        if result.status != last_status:
                            logger.debug(f"Transaction {transaction_id} is {result.status}")
                            last_status = result.status
                        if result.is_sealed:
                            logger.info(f"Transaction {transaction_id} sealed")
                            return result
                        if result.status == EXPIRED:
                            raise SubmissionError(f"Transaction {transaction_id} expired")
                except httpx.HTTPError as e:
                    raise SubmissionError(_error_message(e)) from e
                except (AttributeError, TypeError, ValueError) as e:
                    raise SubmissionError("Malformed transaction result") from e

                if deadline is not None and time.monotonic() >= deadline:
                    raise SubmissionError(f"Timed out waiting for transaction {transaction_id}")
                time.sleep(self.poll_interval)
