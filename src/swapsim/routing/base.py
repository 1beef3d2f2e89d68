"""Swap intent, route candidates and build results.

Jupiter quote responses expose route candidates in one of several shapes.
select_route resolves them against a fixed precedence table so the rest of
the pipeline only ever sees a RouteCandidate (or None).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapIntent:
    """What the operator wants to swap."""

    input_mint: str
    output_mint: str
    ui_amount: str  # e.g. "0.01"
    decimals: int = 9
    slippage_bps: int = 50
    restrict_intermediate_tokens: bool = True
    only_direct_routes: bool = False
    max_accounts: Optional[int] = None


class RouteSource(str, Enum):
    """Where in the quote response a route candidate was found."""

    ROUTES = "routes"  # quote["routes"]
    ROUTE_PLAN = "routePlan"  # quote["routePlan"]
    NESTED_ROUTES = "data.routes"  # quote["data"]["routes"]


def _nested_routes(quote: dict) -> Any:
    data = quote.get("data")
    return data.get("routes") if isinstance(data, dict) else None


# Ordered by precedence
ROUTE_LOCATIONS: list[tuple[RouteSource, Callable[[dict], Any]]] = [
    (RouteSource.ROUTES, lambda q: q.get("routes")),
    (RouteSource.ROUTE_PLAN, lambda q: q.get("routePlan")),
    (RouteSource.NESTED_ROUTES, _nested_routes),
]


@dataclass(frozen=True)
class RouteCandidate:
    """First route candidate of a quote, with optional display fields.

    Route-plan steps keep their venue data under "swapInfo"; display fields
    are read from there when present.
    """

    source: RouteSource
    raw: Any
    amm_key: Optional[str] = None
    label: Optional[str] = None
    percent: Optional[Any] = None
    in_amount: Optional[str] = None
    out_amount: Optional[str] = None

    @classmethod
    def from_raw(cls, source: RouteSource, raw: Any) -> "RouteCandidate":
        if not isinstance(raw, dict):
            return cls(source=source, raw=raw)

        info = raw.get("swapInfo")
        if not isinstance(info, dict):
            info = raw

        return cls(
            source=source,
            raw=raw,
            amm_key=info.get("ammKey"),
            label=info.get("label"),
            percent=raw.get("percent"),
            in_amount=info.get("inAmount"),
            out_amount=info.get("outAmount"),
        )


def select_route(quote: Any) -> Optional[RouteCandidate]:
    """Pick the first candidate from the highest-precedence non-empty list.

    Precedence: routes > routePlan > data.routes. Non-list values are ignored.

    Returns:
        RouteCandidate, or None when the quote carries no route
    """
    if not isinstance(quote, dict):
        return None

    for source, locate in ROUTE_LOCATIONS:
        candidates = locate(quote)
        if isinstance(candidates, list) and candidates:
            logger.debug(f"Selected route from {source.value} ({len(candidates)} candidate(s))")
            return RouteCandidate.from_raw(source, candidates[0])

    return None


@dataclass(frozen=True)
class SerializedTransaction:
    """Full base64 transaction returned by the aggregator."""

    swap_transaction: str
    last_valid_block_height: Optional[int] = None
    prioritization_fee_lamports: Optional[int] = None
    compute_unit_limit: Optional[int] = None


@dataclass(frozen=True)
class SwapInstructions:
    """Raw instruction list returned instead of a full transaction."""

    instructions: Any
    address_lookup_table_addresses: list = field(default_factory=list)


BuiltTransaction = Union[SerializedTransaction, SwapInstructions]


def parse_build_response(data: Any) -> Optional[BuiltTransaction]:
    """Turn a /swap response into exactly one BuiltTransaction variant.

    The serialized transaction wins when both are present.

    Returns:
        BuiltTransaction, or None when neither variant is present
    """
    if not isinstance(data, dict):
        return None

    swap_transaction = data.get("swapTransaction")
    if swap_transaction:
        return SerializedTransaction(
            swap_transaction=swap_transaction,
            last_valid_block_height=data.get("lastValidBlockHeight"),
            prioritization_fee_lamports=data.get("prioritizationFeeLamports"),
            compute_unit_limit=data.get("computeUnitLimit"),
        )

    instructions = data.get("swapInstructions")
    if instructions:
        return SwapInstructions(
            instructions=instructions,
            address_lookup_table_addresses=list(data.get("addressLookupTableAddresses") or []),
        )

    return None
