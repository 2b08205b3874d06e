# reporter.py
"""
Reporter: accumulates computed rows and prints the final table.
Standardised entrypoint: run(table, console).
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nosscan.config import TOKEN_SYMBOL
from nosscan.models import AccountSnapshot, Activity, Health

logger = logging.getLogger("nosscan.reporter")

RED_DOT = "🔴"
GREEN_DOT = "🟢"
TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass(frozen=True)
class ReportRow:
    id: int
    name: str
    address: str
    native_balance: float
    token_balance: float
    last_activity: datetime
    elapsed: timedelta
    activity: Activity
    health: Health


class ReportTable:
    """In-memory rows of one run, IDs assigned in completion order."""

    def __init__(self):
        self.rows: List[ReportRow] = []
        self._next_id = 1

    def __len__(self):
        return len(self.rows)

    def add(self, snap: AccountSnapshot) -> ReportRow:
        row = ReportRow(
            id=self._next_id,
            name=snap.descriptor.display_name,
            address=shorten(snap.descriptor.address),
            native_balance=snap.native_balance,
            token_balance=snap.token_balance,
            last_activity=snap.last_activity,
            elapsed=snap.elapsed,
            activity=snap.activity,
            health=snap.health,
        )
        self.rows.append(row)
        self._next_id += 1
        return row


def shorten(s: str, head: int = 10, tail: int = 10) -> str:
    if len(s) <= head + tail:
        return s
    return s[:head] + "..." + s[-tail:]


def round_seconds(d: timedelta) -> timedelta:
    # a block time ahead of our clock (skew) shows as zero
    return timedelta(seconds=max(0, round(d.total_seconds())))


def format_time(ts: datetime) -> str:
    # local wall clock, like the progress lines
    return ts.astimezone().strftime(TIME_FORMAT)


def status_dot(ok: bool) -> str:
    return GREEN_DOT if ok else RED_DOT


def build_table(table: ReportTable, token_symbol: str = TOKEN_SYMBOL) -> Table:
    symbol = escape(token_symbol)
    t = Table(header_style="green underline")
    t.add_column("ID", style="yellow", justify="right")
    for col in ("Name", "Account", "Solana", symbol, "Last Entry", "Difftime", "Active"):
        t.add_column(col)

    for row in table.rows:
        t.add_row(
            str(row.id),
            escape(row.name),
            escape(row.address),
            f"{row.native_balance:.4f} SOL{status_dot(row.health is Health.HEALTHY)}",
            f"{row.token_balance:.2f} {symbol}",
            format_time(row.last_activity),
            str(round_seconds(row.elapsed)),
            status_dot(row.activity is Activity.ACTIVE),
        )
    return t


def render(table: ReportTable, console: Console, now: datetime,
           token_symbol: str = TOKEN_SYMBOL):
    """Print the table and the 'Last Update' line. Console errors propagate."""
    console.print(build_table(table, token_symbol))
    console.print(f"\nLast Update : {format_time(now)}\n", style="yellow")
    logger.info("📊 Report rendered (%d rows)", len(table))


def run(table: ReportTable, console: Optional[Console] = None,
        now: Optional[datetime] = None, token_symbol: str = TOKEN_SYMBOL) -> ReportTable:
    """Standardised entrypoint."""
    console = console or Console()
    now = now or datetime.now().astimezone()
    render(table, console, now, token_symbol)
    return table
