"""
nosscan/config.py
Run settings and the account list.

Defaults live as module constants; environment variables (optionally from a
.env file) override them, and main.py applies CLI flags on top.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field, replace
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from nosscan.models import AccountDescriptor

LOG = logging.getLogger("nosscan.config")

CONFIG_PATH = Path("config.json")
RPC_URL = "https://api.mainnet-beta.solana.com"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_SYMBOL = "NOS"
PACING_SECONDS = 5.0
STALE_AFTER = timedelta(hours=3)
LOW_BALANCE_THRESHOLD = 0.025  # SOL
REQUEST_TIMEOUT = 10.0

# keys of one entry in config.json
_FIELDS = {
    "account": "address",
    "targetPubkey": "target_token_account",
    "name": "display_name",
}


class ConfigError(Exception):
    """Configuration is missing or malformed; the run cannot start."""


@dataclass(frozen=True)
class Settings:
    rpc_url: str = RPC_URL
    token_program_id: str = TOKEN_PROGRAM_ID
    token_symbol: str = TOKEN_SYMBOL
    pacing_seconds: float = PACING_SECONDS
    stale_after: timedelta = field(default=STALE_AFTER)
    low_balance_threshold: float = LOW_BALANCE_THRESHOLD
    request_timeout: float = REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Build settings from NOSSCAN_* environment variables."""
        load_dotenv(env_file)
        stale_hours = _env_float("NOSSCAN_STALE_HOURS", STALE_AFTER.total_seconds() / 3600)
        try:
            stale_after = timedelta(hours=stale_hours)
        except OverflowError as exc:
            raise ConfigError(f"NOSSCAN_STALE_HOURS is out of range: {stale_hours}") from exc
        return cls(
            rpc_url=os.getenv("NOSSCAN_RPC_URL") or RPC_URL,
            token_program_id=os.getenv("NOSSCAN_TOKEN_PROGRAM_ID") or TOKEN_PROGRAM_ID,
            token_symbol=os.getenv("NOSSCAN_TOKEN_SYMBOL") or TOKEN_SYMBOL,
            pacing_seconds=_env_float("NOSSCAN_PACING_SECONDS", PACING_SECONDS),
            stale_after=stale_after,
            low_balance_threshold=_env_float("NOSSCAN_LOW_BALANCE", LOW_BALANCE_THRESHOLD),
            request_timeout=_env_float("NOSSCAN_TIMEOUT", REQUEST_TIMEOUT),
        )

    def override(self, **changes) -> "Settings":
        """Return a copy with the non-None values of `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be a finite number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


def load_accounts(path: str | Path = CONFIG_PATH) -> List[AccountDescriptor]:
    """
    Read the ordered account list from a JSON file.

    Expected shape:
        [{"account": "...", "targetPubkey": "...", "name": "..."}, ...]

    Raises ConfigError on any read or shape problem.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Error reading config file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Error parsing config file {path}: {exc}") from exc

    if not isinstance(data, list):
        raise ConfigError(f"{path}: expected a list of accounts, got {type(data).__name__}")

    accounts = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ConfigError(f"{path}: entry #{i} is not an object")
        kwargs = {}
        for key, attr in _FIELDS.items():
            value = entry.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{path}: entry #{i} has no valid '{key}'")
            kwargs[attr] = value.strip()
        accounts.append(AccountDescriptor(**kwargs))

    LOG.info("Loaded %d accounts from %s", len(accounts), path)
    return accounts
