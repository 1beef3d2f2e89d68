"""Operator-facing text output.

format_* functions are pure; Reporter only writes their text to a stream.
"""

import json
import sys
from typing import Any, Optional, TextIO

from swapsim.routing.base import (
    RouteCandidate,
    SerializedTransaction,
    SwapInstructions,
    SwapIntent,
)
from swapsim.simulation.base import NO_LOGS_MESSAGE, SimulationOutcome

INSTRUCTIONS_PREVIEW_CHARS = 800


def dump_json(payload: Any) -> str:
    """Pretty JSON, falling back to str() for values json cannot encode."""
    return json.dumps(payload, indent=2, default=str)


def format_banner(user_public_key: str, signing_enabled: bool, rpc_url: str) -> str:
    return "\n".join(
        [
            "Jupiter Swap simulation (signed OR unsigned/public-key-only)",
            f"Using userPublicKey: {user_public_key}",
            f"Signing enabled: {str(signing_enabled).lower()}",
            f"RPC: {rpc_url}",
        ]
    )


def format_quote_request(intent: SwapIntent, amount: int) -> str:
    return (
        f"Requesting quote: {intent.ui_amount} (atomic: {amount}) "
        f"from {intent.input_mint} -> {intent.output_mint}"
    )


def format_route_summary(quote: dict, route: RouteCandidate) -> str:
    """Summary of the selected route; quote-level fields take priority."""
    lines = [
        "=== Top route summary ===",
        f"inAmount: {_first(quote.get('inAmount'), route.in_amount)}",
        f"outAmount: {_first(quote.get('outAmount'), route.out_amount)}",
        f"swapUsdValue: {_first(quote.get('swapUsdValue'), 'N/A')}",
    ]
    if route.amm_key:
        lines.append(f"AMM: {route.amm_key}")
    if route.label:
        lines.append(f"Label: {route.label}")
    if route.percent is not None:
        lines.append(f"Percent routed here: {route.percent}")
    lines.append(f"priceImpactPct: {_first(quote.get('priceImpactPct'), 'N/A')}")
    lines.append("=========================")
    return "\n".join(lines)


def format_no_route(quote: Any) -> str:
    return "No route found in quote. Full quote response:\n" + dump_json(quote)


def format_incomplete_build(response: Any) -> str:
    return (
        "Build swap response missing swapTransaction or swapInstructions. Full response:\n"
        + dump_json(response)
    )


def format_built_transaction(built: SerializedTransaction) -> str:
    return "\n".join(
        [
            "Swap transaction built.",
            f"lastValidBlockHeight: {_first(built.last_valid_block_height, 'N/A')}",
            f"prioritizationFeeLamports: {_first(built.prioritization_fee_lamports, 'N/A')}",
            f"computeUnitLimit: {_first(built.compute_unit_limit, 'N/A')}",
        ]
    )


def format_instructions(built: SwapInstructions) -> str:
    preview = dump_json(built.instructions)[:INSTRUCTIONS_PREVIEW_CHARS]
    lines = [
        "swapInstructions returned instead of a serialized transaction.",
        "Composing a transaction from raw instructions is not supported; nothing was simulated.",
        "swapInstructions (truncated):",
        preview,
    ]
    if built.address_lookup_table_addresses:
        lines.append(
            "Address lookup tables: " + ", ".join(map(str, built.address_lookup_table_addresses))
        )
    return "\n".join(lines)


def format_logs(logs: Optional[tuple]) -> str:
    if logs is None:
        return f"{NO_LOGS_MESSAGE}."
    return "\n".join(["=== Logs ===", *logs])


def format_outcome(outcome: SimulationOutcome, signed: bool) -> str:
    """Final simulation report."""
    mode = "signed" if signed else "unsigned"
    lines = []

    for strategy, error in outcome.failed_attempts:
        lines.append(f"{strategy} simulation failed: {error}")

    if outcome.raw is not None:
        lines.append(f"=== Simulation result ({mode}, via {outcome.strategy}) ===")
        lines.append(dump_json(outcome.raw))

    if outcome.succeeded:
        lines.append("Simulation succeeded.")
    elif outcome.raw is not None:
        lines.append(f"Simulation indicates failure: {dump_json(outcome.ledger_error)}")
    else:
        lines.append(f"Simulation could not be completed: {outcome.ledger_error}")

    if outcome.units_consumed is not None:
        lines.append(f"Compute units consumed: {outcome.units_consumed}")

    if outcome.raw is not None:
        lines.append(format_logs(outcome.logs))

    if outcome.hint:
        lines.append(outcome.hint)

    return "\n".join(lines)


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


class Reporter:
    """Writes report sections to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def emit(self, text: str) -> None:
        print(text, file=self.stream)

    def banner(self, user_public_key: str, signing_enabled: bool, rpc_url: str) -> None:
        self.emit(format_banner(user_public_key, signing_enabled, rpc_url))

    def quote_request(self, intent: SwapIntent, amount: int) -> None:
        self.emit(format_quote_request(intent, amount))

    def route_summary(self, quote: dict, route: RouteCandidate) -> None:
        self.emit(format_route_summary(quote, route))

    def no_route(self, quote: Any) -> None:
        self.emit(format_no_route(quote))

    def incomplete_build(self, response: Any) -> None:
        self.emit(format_incomplete_build(response))

    def built_transaction(self, built: SerializedTransaction) -> None:
        self.emit(format_built_transaction(built))

    def instructions(self, built: SwapInstructions) -> None:
        self.emit(format_instructions(built))

    def outcome(self, outcome: SimulationOutcome, signed: bool) -> None:
        self.emit(format_outcome(outcome, signed))
