"""Command-line interface.

Usage:
    balance-checker --address <ADDR> [--chain sepolia] [--json] [--concurrent]
    balance-checker --list-chains
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from balance_checker.aggregator import BalanceAggregator
from balance_checker.balances import Balance
from balance_checker.chains import get_config
from balance_checker.config import get_settings
from balance_checker.errors import BalanceCheckerError

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 60


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="balance-checker",
        description="Query blockchain balances for multiple chains and tokens",
    )
    parser.add_argument("-a", "--address", help="The blockchain address to query")
    parser.add_argument(
        "-c",
        "--chain",
        help="Chain to query (sepolia, solana-devnet, etc.; default: DEFAULT_CHAIN setting)",
    )
    parser.add_argument("--json", action="store_true", help="Print balances as JSON")
    parser.add_argument(
        "--concurrent",
        action="store_true",
        default=None,
        help="Fetch token balances concurrently",
    )
    parser.add_argument(
        "--list-chains", action="store_true", help="List configured chains and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def format_balance_line(balance: Balance) -> str:
    """Format one report line: symbol, right-aligned amount, raw amount."""
    return f"{balance.token:<6} | {balance.formatted:>20} (raw: {balance.raw_amount})"


def print_report(chain_name: str, balances: Sequence[Balance]) -> None:
    """Print the balance report."""
    print(f"Chain: {chain_name}")
    print(SEPARATOR)
    for balance in balances:
        print(format_balance_line(balance))
    print(SEPARATOR)


def print_chains() -> None:
    """Print configured chains."""
    config = get_config()
    for name in config.chain_names():
        chain = config.get_chain(name)
        print(f"{name:<16} {chain.chain_type:<8} {chain.display_name}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except BalanceCheckerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or settings.debug) else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    chain_name = args.chain or settings.default_chain

    try:
        if args.list_chains:
            print_chains()
            return 0

        if not args.address:
            parser.error("the following arguments are required: -a/--address")

        if not args.json:
            print(f"Querying balances for address: {args.address}\n")

        aggregator = BalanceAggregator(settings=settings)
        balances = asyncio.run(
            aggregator.get_balances(chain_name, args.address, concurrent=args.concurrent)
        )
    except BalanceCheckerError as e:
        logger.debug("Balance query failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([b.model_dump() for b in balances], indent=2))
    else:
        print_report(chain_name, balances)

    return 0


def run() -> None:
    """Console script entry point."""
    # Load .env before settings are read
    from dotenv import load_dotenv

    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    run()
