"""config/fixture_config.py

Configuration for a fixture minting run.

Passed explicitly to every component; nothing here is process-global.
Values come from an optional YAML mapping, then environment overrides:

    RPC_URL, DAS_API_URL, DEBUG_LOGS, ERROR_LOGS
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


DEFAULT_RPC_URL = "https://rpc.test.honeycombprotocol.com/"
MAX_DAS_PAGE_SIZE = 1000

_COMMITMENTS = ("processed", "confirmed", "finalized")

_ENV_KEYS = {
    "RPC_URL": "rpc_url",
    "DAS_API_URL": "das_api_url",
    "DEBUG_LOGS": "debug_logs",
    "ERROR_LOGS": "error_logs",
}


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class FixtureConfig:
    """Endpoints and submission defaults for one test run."""
    rpc_url: str = DEFAULT_RPC_URL
    das_api_url: Optional[str] = None  # falls back to rpc_url

    # Submission defaults
    commitment: str = "finalized"
    provisioning_commitment: str = "confirmed"
    skip_preflight: bool = True

    # Indexer
    das_page_size: int = MAX_DAS_PAGE_SIZE
    das_max_retries: int = 3
    request_timeout_seconds: float = 30.0

    # Logging switches
    debug_logs: bool = False
    error_logs: bool = False

    def __post_init__(self):
        if not self.rpc_url:
            raise ConfigError("rpc_url must not be empty")
        for name in ("commitment", "provisioning_commitment"):
            value = getattr(self, name)
            if value not in _COMMITMENTS:
                raise ConfigError(f"{name} must be one of {'|'.join(_COMMITMENTS)}, got: {value}")
        if not 0 < self.das_page_size <= MAX_DAS_PAGE_SIZE:
            raise ConfigError(
                f"das_page_size must be within (0, {MAX_DAS_PAGE_SIZE}], got {self.das_page_size}"
            )
        if self.das_max_retries < 0:
            raise ConfigError(f"das_max_retries cannot be negative, got {self.das_max_retries}")
        if self.request_timeout_seconds <= 0:
            raise ConfigError(
                f"request_timeout_seconds must be positive, got {self.request_timeout_seconds}"
            )

    @property
    def indexer_url(self) -> str:
        return self.das_api_url or self.rpc_url


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _coerce(name: str, value: Any) -> Any:
    field_type = {f.name: f.type for f in dataclasses.fields(FixtureConfig)}[name]
    if field_type == "bool":
        return _parse_bool(value)
    if field_type == "int":
        return int(value)
    if field_type == "float":
        return float(value)
    return value


def load_fixture_config(
    path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> FixtureConfig:
    """
    Build a FixtureConfig from YAML (optional) and environment overrides.

    Raises:
        ConfigError: On a missing file, a non-mapping document, unknown keys
            or invalid values.
    """
    env = os.environ if env is None else env
    known = {f.name for f in dataclasses.fields(FixtureConfig)}
    values: Dict[str, Any] = {}

    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config not found: {p}")
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{p} must be a YAML mapping (dict at top-level)")
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        values.update(raw)

    for env_key, name in _ENV_KEYS.items():
        if env.get(env_key):
            values[name] = env[env_key]

    try:
        values = {name: _coerce(name, value) for name, value in values.items()}
        return FixtureConfig(**values)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid fixture config: {e}") from e
