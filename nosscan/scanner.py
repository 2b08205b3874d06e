# nosscan/scanner.py
"""
Sequential account scan.

Per account: token accounts -> native balance -> latest signature -> compute.
An RPC failure ends that account only; the run moves on to the next one
after the pacing delay.
"""
import logging
import time
from datetime import datetime
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from nosscan import balances
from nosscan.config import Settings
from nosscan.models import AccountDescriptor, AccountSnapshot, Activity, Outcome, Skipped, SkipReason
from nosscan.reporter import ReportTable, format_time, round_seconds
from nosscan.rpc import RpcError, SolanaRpcClient

LOG = logging.getLogger("nosscan.scanner")


def _now() -> datetime:
    return datetime.now().astimezone()


def scan_account(client: SolanaRpcClient, account: AccountDescriptor,
                 settings: Settings, now: Callable[[], datetime] = _now) -> Outcome:
    try:
        entries = client.get_token_accounts_by_owner(account.address, settings.token_program_id)
    except RpcError as exc:
        return Skipped(account, SkipReason.TOKEN_FETCH_FAILED, str(exc))

    try:
        lamports = client.get_balance(account.address)
    except RpcError as exc:
        return Skipped(account, SkipReason.BALANCE_FETCH_FAILED, str(exc))

    try:
        signature = client.get_latest_signature(account.address)
    except RpcError as exc:
        return Skipped(account, SkipReason.SIGNATURE_FETCH_FAILED, str(exc))

    return balances.evaluate(
        account, entries, lamports, signature, now(),
        stale_after=settings.stale_after,
        low_balance_threshold=settings.low_balance_threshold,
    )


def report_outcome(outcome: Outcome, console: Console, token_symbol: str):
    """Progress lines and diagnostics for one finished account."""
    acc = outcome.descriptor
    symbol = escape(token_symbol)

    if isinstance(outcome, AccountSnapshot):
        if outcome.token_found:
            console.print(f"{symbol} Balance: {outcome.token_balance:.2f} {symbol}",
                          style="green")
        else:
            console.print(f"No {symbol} balance found for {escape(acc.display_name)} "
                          f"with pubkey {escape(acc.target_token_account)}")
        colour = "green" if outcome.activity is Activity.ACTIVE else "red"
        console.print(
            f"Last Confirmed Signature: {format_time(outcome.last_activity)} "
            f"({round_seconds(outcome.elapsed)})\n",
            style=colour,
        )
        return

    if outcome.reason is SkipReason.NO_SIGNATURES:
        console.print(f"No confirmed signatures found for {escape(acc.display_name)}\n")
    elif outcome.reason is SkipReason.NO_BLOCK_TIME:
        LOG.info("%s (%s) skipped: %s", acc.display_name, acc.address, outcome.detail)
    else:
        LOG.warning("%s (%s) skipped [%s]: %s",
                    acc.display_name, acc.address, outcome.reason.value, outcome.detail)


def run(accounts: Iterable[AccountDescriptor], client: SolanaRpcClient, settings: Settings,
        console: Optional[Console] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _now) -> ReportTable:
    """Scan every account in order and return the filled report table."""
    console = console or Console()
    table = ReportTable()
    accounts = list(accounts)

    LOG.info("Starting scan of %d accounts…", len(accounts))
    for i, acc in enumerate(accounts):
        if i and settings.pacing_seconds > 0:
            sleep(settings.pacing_seconds)

        console.print(f"Account: {acc.address}, Name: {escape(acc.display_name)}", style="cyan")
        outcome = scan_account(client, acc, settings, clock)
        report_outcome(outcome, console, settings.token_symbol)

        if isinstance(outcome, AccountSnapshot):
            table.add(outcome)

    LOG.info("✅ Scan completed: %d/%d accounts reported.", len(table), len(accounts))
    return table
