# nosscan/balances.py
"""
Balance & activity computation for one account.

Pure functions: the scanner fetches, this module decides.
  - token balance: raw integer amount shifted by `decimals` places
  - native balance: lamports -> SOL
  - activity: STALE when the last signature is older than `stale_after`
  - health: LOW when the SOL balance is under `low_balance_threshold`
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from nosscan.config import LOW_BALANCE_THRESHOLD, STALE_AFTER
from nosscan.models import (
    AccountDescriptor,
    AccountSnapshot,
    Activity,
    Health,
    Outcome,
    SignatureRecord,
    Skipped,
    SkipReason,
    TokenAccountEntry,
)

LAMPORTS_PER_SOL = 10**9


def scale_amount(raw_amount: str, decimals: int) -> float:
    """
    Shift an integer amount by `decimals` decimal places.

    The shift is done on a Decimal so large amounts are not rounded
    before scaling. Raises ValueError if `raw_amount` is not an integer.
    """
    text = raw_amount.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"invalid token amount {raw_amount!r}")
    return float(Decimal(text).scaleb(-decimals))


def token_balance(entries: Iterable[TokenAccountEntry], target: str) -> Tuple[float, bool]:
    """Return (balance, found) for the token account whose pubkey is `target`."""
    for entry in entries:
        if entry.pubkey == target:
            return scale_amount(entry.raw_amount, entry.decimals), True
    return 0.0, False


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def classify_activity(elapsed: timedelta, stale_after: timedelta = STALE_AFTER) -> Activity:
    # exactly `stale_after` still counts as active
    return Activity.STALE if elapsed > stale_after else Activity.ACTIVE


def classify_health(native_balance: float, threshold: float = LOW_BALANCE_THRESHOLD) -> Health:
    return Health.LOW if native_balance < threshold else Health.HEALTHY


def evaluate(
    descriptor: AccountDescriptor,
    entries: Iterable[TokenAccountEntry],
    lamports: int,
    signature: Optional[SignatureRecord],
    now: datetime,
    stale_after: timedelta = STALE_AFTER,
    low_balance_threshold: float = LOW_BALANCE_THRESHOLD,
) -> Outcome:
    """
    Turn the three RPC results for one account into a snapshot or a skip.

    `now` must be timezone-aware.
    """
    try:
        tokens, found = token_balance(entries, descriptor.target_token_account)
    except ValueError as exc:
        return Skipped(descriptor, SkipReason.AMOUNT_UNPARSEABLE, str(exc))

    if signature is None:
        return Skipped(descriptor, SkipReason.NO_SIGNATURES, "no confirmed signatures")
    if not signature.block_time:
        return Skipped(descriptor, SkipReason.NO_BLOCK_TIME,
                       f"signature {signature.signature} has no block time")

    native = lamports_to_sol(lamports)
    last_activity = datetime.fromtimestamp(signature.block_time, tz=timezone.utc)
    elapsed = now - last_activity

    return AccountSnapshot(
        descriptor=descriptor,
        native_balance=native,
        token_balance=tokens,
        token_found=found,
        last_activity=last_activity,
        elapsed=elapsed,
        activity=classify_activity(elapsed, stale_after),
        health=classify_health(native, low_balance_threshold),
    )
