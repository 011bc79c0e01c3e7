"""config/key_manager.py

Keypair loading from environment variables.

Accepted formats:
- JSON array of 64 bytes (solana-keygen output, e.g. "[12, 45, 78, ...]")
- Base58 encoded 64-byte secret key
"""

from __future__ import annotations

import json
import os
from typing import Mapping, Optional

import base58
from solders.keypair import Keypair


ADMIN_KEYPAIR_ENV = "ADMIN_KEYPAIR"
USER_KEYPAIR_ENV = "USER_KEYPAIR"

SECRET_KEY_LENGTH = 64


class KeyLoadError(Exception):
    """Raised when key loading fails."""
    pass


def parse_keypair(key_str: str) -> Keypair:
    """Parse a secret key string into a Keypair.

    Raises:
        KeyLoadError: If the string is neither a byte array nor base58.
    """
    key_str = key_str.strip()
    if not key_str:
        raise KeyLoadError("Empty key string")

    key_bytes: Optional[bytes] = None
    if key_str.startswith("["):
        try:
            key_array = json.loads(key_str)
        except json.JSONDecodeError as e:
            raise KeyLoadError(f"Invalid JSON key array: {e}") from e
        if not isinstance(key_array, list) or not all(isinstance(x, int) for x in key_array):
            raise KeyLoadError("JSON key must be an array of integers")
        try:
            key_bytes = bytes(key_array)
        except ValueError as e:
            raise KeyLoadError(f"Invalid byte value in key array: {e}") from e
    else:
        try:
            key_bytes = base58.b58decode(key_str)
        except ValueError as e:
            raise KeyLoadError(f"Invalid base58 key: {e}") from e

    if len(key_bytes) != SECRET_KEY_LENGTH:
        raise KeyLoadError(
            f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {len(key_bytes)}"
        )
    try:
        return Keypair.from_bytes(key_bytes)
    except Exception as e:
        raise KeyLoadError(f"Invalid ed25519 secret key: {e}") from e


def load_keypair_from_env(
    var: str = ADMIN_KEYPAIR_ENV,
    env: Optional[Mapping[str, str]] = None,
) -> Keypair:
    """Load a Keypair from the environment variable `var`.

    Raises:
        KeyLoadError: If the variable is missing or the key is invalid.
    """
    env = os.environ if env is None else env
    key_str = env.get(var, "")
    if not key_str:
        raise KeyLoadError(f"{var} environment variable is not set")
    return parse_keypair(key_str)
