"""
Command Line Entry Point

    transaction-processor transactions.csv > accounts.csv

Reads the transaction file, applies every event and prints the account summary
CSV to stdout. Diagnostics go to stderr and nothing is printed to stdout when
the input cannot be opened or parsed.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import get_config
from .csv_io import summaries_from_path, write_summaries
from .exceptions import RecordParseError
from .ledger import LedgerEngine
from .logging_config import setup_logging, log_action

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transaction-processor",
        description="Apply a CSV of transactions and print per-client account balances",
    )
    parser.add_argument("input", help="Path to the transactions CSV file")
    parser.add_argument(
        "--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
        help="Override the configured log level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = get_config()

    try:
        logger = setup_logging(
            level=args.log_level or config.log_level,
            log_format=config.log_format,
            log_file=config.log_file,
        )
    except ValueError as e:
        parser.error(str(e))
    except OSError as e:
        parser.error(f"cannot open log file: {e}")

    engine = LedgerEngine()
    try:
        summaries = summaries_from_path(args.input, encoding=config.csv_encoding, engine=engine)
    except RecordParseError as e:
        logger.error(f"Failed to parse {args.input}: {e}")
        print(f"error while parsing csv: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError, LookupError) as e:
        logger.error(f"Failed to read {args.input}: {e}")
        print(f"i/o error: {e}", file=sys.stderr)
        return 1

    log_action(
        logger, "info", f"Processed {sum(engine.stats.values())} events for {len(summaries)} clients",
        action="process_file", resource=args.input,
        extra={outcome.value: count for outcome, count in engine.stats.items()}
    )

    try:
        write_summaries(summaries, sys.stdout)
        sys.stdout.flush()
    except OSError as e:
        logger.error(f"Failed to write summary: {e}")
        print(f"i/o error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
