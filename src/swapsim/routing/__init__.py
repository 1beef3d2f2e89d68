"""Routing module: swap intent, route selection and the Jupiter client."""

from swapsim.routing.base import (
    BuiltTransaction,
    RouteCandidate,
    RouteSource,
    SerializedTransaction,
    SwapInstructions,
    SwapIntent,
    parse_build_response,
    select_route,
)
from swapsim.routing.jupiter import JupiterClient, create_jupiter_client

__all__ = [
    # Data model
    "SwapIntent",
    "RouteSource",
    "RouteCandidate",
    "SerializedTransaction",
    "SwapInstructions",
    "BuiltTransaction",
    # Resolvers
    "select_route",
    "parse_build_response",
    # Client
    "JupiterClient",
    "create_jupiter_client",
]
