# nosscan/cli.py
"""
Command-line entrypoint for nosscan.
Loads the account list, scans every account over RPC, then prints the report.
"""

import argparse
import logging
import math
import sys

from rich.console import Console

from nosscan import reporter, scanner
from nosscan.config import CONFIG_PATH, ConfigError, Settings, load_accounts
from nosscan.rpc import SolanaRpcClient

LOG = logging.getLogger("nosscan.cli")


def _seconds(raw: str) -> float:
    """argparse type for --delay: a finite, non-negative number."""
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}")
    if not math.isfinite(value) or value < 0:
        raise argparse.ArgumentTypeError(f"must be a finite, non-negative number: {raw!r}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Solana account balance & activity scanner")
    parser.add_argument("-c", "--config", default=str(CONFIG_PATH),
                        help="JSON file with the accounts to scan (default: config.json)")
    parser.add_argument("--rpc-url", help="Solana JSON-RPC endpoint (default: mainnet-beta)")
    parser.add_argument("--delay", type=_seconds, dest="pacing_seconds",
                        help="Seconds to wait between accounts (default: 5)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        settings = Settings.from_env().override(
            rpc_url=args.rpc_url,
            pacing_seconds=args.pacing_seconds,
        )
        accounts = load_accounts(args.config)
    except ConfigError as e:
        LOG.error("%s", e)
        return 1

    console = Console()
    console.print("")
    with SolanaRpcClient(settings.rpc_url, timeout=settings.request_timeout) as client:
        table = scanner.run(accounts, client, settings, console)

    reporter.run(table, console, token_symbol=settings.token_symbol)
    LOG.info("🏁 Run complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
