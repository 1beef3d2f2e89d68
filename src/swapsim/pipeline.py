"""Swap dry-run pipeline.

intent -> atomic amount -> quote -> route -> build -> sign? -> simulate -> report

Fatal errors (ConfigError, NetworkError, DecodeError, SignError) propagate.
"No route", an incomplete build response and instruction-only builds stop
the run early with a reported status; a rejected simulation is a normal
outcome.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from swapsim.amounts import to_atomic_amount
from swapsim.config import PipelineConfig
from swapsim.reporter import Reporter
from swapsim.routing.base import (
    BuiltTransaction,
    RouteCandidate,
    SwapInstructions,
    parse_build_response,
    select_route,
)
from swapsim.routing.jupiter import JupiterClient, create_jupiter_client
from swapsim.signing.signer import PreparedTransaction, SigningStage
from swapsim.simulation.base import SimulationOutcome
from swapsim.simulation.engine import SimulationEngine, create_simulation_engine

logger = logging.getLogger(__name__)


class PipelineStatus(str, Enum):
    """Where a run stopped."""

    NO_ROUTE = "no_route"
    INCOMPLETE_BUILD = "incomplete_build"
    INSTRUCTIONS_ONLY = "instructions_only"
    SIMULATED = "simulated"


@dataclass
class PipelineResult:
    """Everything one run produced, for reporting and tests."""

    status: PipelineStatus
    amount: int
    quote: Any = None
    route: Optional[RouteCandidate] = None
    build_response: Any = None
    built: Optional[BuiltTransaction] = None
    prepared: Optional[PreparedTransaction] = None
    outcome: Optional[SimulationOutcome] = None


class SwapSimulationPipeline:
    """Runs one swap intent through quote, build, signing and simulation."""

    def __init__(
        self,
        config: PipelineConfig,
        jupiter: Optional[JupiterClient] = None,
        engine_factory: Optional[Callable[[PipelineConfig], SimulationEngine]] = None,
        reporter: Optional[Reporter] = None,
    ):
        self.config = config
        self.jupiter = jupiter or create_jupiter_client(config)
        self.engine_factory = engine_factory or create_simulation_engine
        self.signing = SigningStage(config.keypair)
        self.reporter = reporter or Reporter()

    async def run(self) -> PipelineResult:
        """Run the pipeline once.

        Raises:
            ConfigError: Invalid amount
            NetworkError: Quote or build request failed
            DecodeError: Signing enabled and the transaction could not be decoded
            SignError: Local signing failed
        """
        config = self.config
        intent = config.intent

        self.reporter.banner(config.user_public_key, config.signing_enabled, config.rpc_url)

        amount = to_atomic_amount(intent.ui_amount, intent.decimals)
        self.reporter.quote_request(intent, amount)

        quote = await self.jupiter.get_quote(intent, amount)
        route = select_route(quote)
        if route is None:
            logger.warning(f"No route found for {intent.input_mint} -> {intent.output_mint}")
            self.reporter.no_route(quote)
            return PipelineResult(status=PipelineStatus.NO_ROUTE, amount=amount, quote=quote)

        self.reporter.route_summary(quote, route)

        build_response = await self.jupiter.build_swap(quote, config.user_public_key)
        built = parse_build_response(build_response)
        result = PipelineResult(
            status=PipelineStatus.INCOMPLETE_BUILD,
            amount=amount,
            quote=quote,
            route=route,
            build_response=build_response,
            built=built,
        )

        if built is None:
            logger.warning("Build response carried neither swapTransaction nor swapInstructions")
            self.reporter.incomplete_build(build_response)
            return result

        if isinstance(built, SwapInstructions):
            self.reporter.instructions(built)
            result.status = PipelineStatus.INSTRUCTIONS_ONLY
            return result

        self.reporter.built_transaction(built)
        result.prepared = self.signing.prepare(built)

        engine = self.engine_factory(config)
        result.outcome = await engine.run(result.prepared)
        result.status = PipelineStatus.SIMULATED

        self.reporter.outcome(result.outcome, signed=result.prepared.is_signed)
        return result


async def run_pipeline(config: PipelineConfig, reporter: Optional[Reporter] = None) -> PipelineResult:
    """Run the pipeline with the default Jupiter client and simulation engine."""
    return await SwapSimulationPipeline(config, reporter=reporter).run()
