"""Command-line entry point.

Reads configuration from the environment (.env supported), lets flags
override it, runs one dry-run swap and exits 1 only on fatal errors.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from swapsim.config import build_settings, load_config
from swapsim.errors import SwapSimError
from swapsim.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Quote, build and simulate a Jupiter swap without broadcasting it"
    )
    parser.add_argument("--input-mint", help="Input token mint (default: INPUT_MINT)")
    parser.add_argument("--output-mint", help="Output token mint (default: OUTPUT_MINT)")
    parser.add_argument("--amount", dest="amount_ui", help="Human amount to swap (default: AMOUNT_UI)")
    parser.add_argument(
        "--decimals",
        dest="input_decimals",
        type=int,
        help="Input token decimals (default: INPUT_DECIMALS or 9)",
    )
    parser.add_argument("--slippage-bps", type=int, help="Slippage in bps (default: SLIPPAGE_BPS or 50)")
    parser.add_argument(
        "--only-direct-routes",
        action="store_true",
        default=None,
        help="Only consider single-hop routes",
    )
    parser.add_argument("--max-accounts", type=int, help="Cap on accounts used by the route")
    parser.add_argument("--rpc-url", help="Solana RPC URL (default: RPC_URL)")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Run the dry-run pipeline and return the process exit code."""
    args = parse_args(argv)

    try:
        settings = build_settings(**vars(args))
        configure_logging(settings.debug)
        config = load_config(settings)
    except SwapSimError as e:
        configure_logging(False)
        logger.error(str(e))
        return 1

    try:
        result = asyncio.run(run_pipeline(config))
    except SwapSimError as e:
        logger.error(f"Fatal: {e}")
        return 1

    logger.info(f"Pipeline finished: {result.status.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
