from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


FLOW_ACCESS_NODE_URL: str = os.getenv("FLOW_ACCESS_NODE_URL", "https://rest-testnet.onflow.org")

# Account hosting the NotepadManagerV1 contract
NOTEPAD_MANAGER_ADDRESS: str = os.getenv("NOTEPAD_MANAGER_ADDRESS", "0x9bde7238c9c39e97")


@dataclass(frozen=True)
class Settings:
    access_node_url: str
    notepad_manager_address: str
    gas_limit: int
    poll_interval: float
    seal_timeout: float | None


def load_settings() -> Settings:
    seal_timeout = os.getenv("FLOWNOTES_SEAL_TIMEOUT")
    return Settings(
        access_node_url=os.getenv("FLOW_ACCESS_NODE_URL", FLOW_ACCESS_NODE_URL).rstrip("/"),
        notepad_manager_address=os.getenv("NOTEPAD_MANAGER_ADDRESS", NOTEPAD_MANAGER_ADDRESS),
        gas_limit=int(os.getenv("FLOWNOTES_GAS_LIMIT", "1000")),
        poll_interval=float(os.getenv("FLOWNOTES_POLL_INTERVAL", "1.0")),
        seal_timeout=float(seal_timeout) if seal_timeout else None,
    )


def validate_config() -> Settings:
    invalid: list[str] = []
    try:
        settings = load_settings()
    except ValueError as e:
        raise RuntimeError(f"Invalid numeric environment variable: {e}") from e

    if not settings.access_node_url.startswith(("http://", "https://")):
        invalid.append("FLOW_ACCESS_NODE_URL")
    manager = settings.notepad_manager_address.lower().removeprefix("0x")
    if len(manager) != 16 or any(c not in "0123456789abcdef" for c in manager):
        invalid.append("NOTEPAD_MANAGER_ADDRESS")
    if settings.gas_limit <= 0:
        invalid.append("FLOWNOTES_GAS_LIMIT")
    if settings.poll_interval <= 0:
        invalid.append("FLOWNOTES_POLL_INTERVAL")
    if settings.seal_timeout is not None and settings.seal_timeout <= 0:
        invalid.append("FLOWNOTES_SEAL_TIMEOUT")

    if invalid:
        raise RuntimeError(
            f"Invalid environment variables: {', '.join(invalid)}"
        )
    return settings
