# nosscan/models.py
"""
Plain data types shared by the config loader, RPC adapter, calculator and reporter.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class AccountDescriptor:
    address: str
    target_token_account: str
    display_name: str


@dataclass(frozen=True)
class TokenAccountEntry:
    pubkey: str
    raw_amount: str  # integer, kept as text until scaled
    decimals: int


@dataclass(frozen=True)
class SignatureRecord:
    signature: str
    block_time: int  # unix seconds, 0 when the node has no timestamp
    confirmation_status: str = ""


class Activity(str, Enum):
    ACTIVE = "active"
    STALE = "stale"


class Health(str, Enum):
    LOW = "low"
    HEALTHY = "healthy"


class SkipReason(str, Enum):
    TOKEN_FETCH_FAILED = "token_fetch_failed"
    BALANCE_FETCH_FAILED = "balance_fetch_failed"
    SIGNATURE_FETCH_FAILED = "signature_fetch_failed"
    AMOUNT_UNPARSEABLE = "amount_unparseable"
    NO_SIGNATURES = "no_signatures"
    NO_BLOCK_TIME = "no_block_time"


@dataclass(frozen=True)
class AccountSnapshot:
    """Everything computed for one account in one run."""
    descriptor: AccountDescriptor
    native_balance: float
    token_balance: float
    token_found: bool
    last_activity: datetime
    elapsed: timedelta
    activity: Activity
    health: Health


@dataclass(frozen=True)
class Skipped:
    descriptor: AccountDescriptor
    reason: SkipReason
    detail: str = ""


Outcome = Union[AccountSnapshot, Skipped]
