from __future__ import annotations

import logging

from .errors import LedgerError
from .ledger import Identity, LedgerClient

logger = logging.getLogger(__name__)


async def authenticate(ledger: LedgerClient) -> Identity | None:
    """
    Run the wallet sign-in. Returns the signed-in identity, or ``None`` when
    the user backed out or the wallet failed.
    """
    try:
        identity = await ledger.authenticate()
    except LedgerError as e:
        logger.warning(f"Sign-in failed: {e}")
        return None

    if identity is None or not identity.address:
        logger.info("Sign-in cancelled")
        return None

    logger.info(f"Signed in as {identity.address}")
    return identity
