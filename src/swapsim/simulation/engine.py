"""Simulation engine: ordered strategies, first result wins.

NOT_STARTED -> PRIMARY_ATTEMPTED -> (FALLBACK_ATTEMPTED) -> DONE

A strategy that raises hands over to the next one. When the last strategy
raises too, the error is folded into a failed outcome instead of propagating.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from swapsim.signing.signer import PreparedTransaction
from swapsim.simulation.base import (
    SimulationOutcome,
    SimulationState,
    SimulationStrategy,
)
from swapsim.simulation.native import NativeSimulateStrategy
from swapsim.simulation.rpc import RawRpcSimulateStrategy

if TYPE_CHECKING:
    from swapsim.config import PipelineConfig

logger = logging.getLogger(__name__)

CHANGE_RPC_HINT = (
    "Recommendation: try a different RPC_URL (e.g., https://api.mainnet-beta.solana.com) "
    "in your .env and re-run."
)


class SimulationEngine:
    """Runs simulation strategies in order until one returns a result."""

    def __init__(self, strategies: list[SimulationStrategy]):
        if not strategies:
            raise ValueError("SimulationEngine needs at least one strategy")
        self.strategies = strategies
        self.state = SimulationState.NOT_STARTED
        self.history: list[SimulationState] = [self.state]

    def _transition(self, state: SimulationState) -> None:
        logger.debug(f"Simulation state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    async def run(self, prepared: PreparedTransaction) -> SimulationOutcome:
        """Simulate a prepared transaction, never broadcasting it.

        Returns:
            Outcome of the first strategy that produced a result, or a failed
            outcome carrying the last error and an RPC hint
        """
        if self.state != SimulationState.NOT_STARTED:
            raise RuntimeError("SimulationEngine instances are single-use")

        failures: list[tuple[str, str]] = []
        last_error: Optional[Exception] = None

        for position, strategy in enumerate(self.strategies):
            self._transition(
                SimulationState.PRIMARY_ATTEMPTED if position == 0 else SimulationState.FALLBACK_ATTEMPTED
            )
            try:
                outcome = await strategy.simulate(prepared)
            except Exception as e:
                logger.warning(f"{strategy.name} simulation failed: {type(e).__name__}: {e}")
                failures.append((strategy.name, f"{type(e).__name__}: {e}"))
                last_error = e
                continue

            self._transition(SimulationState.DONE)
            logger.info(
                f"Simulation via {strategy.name}: {'success' if outcome.succeeded else 'failure'}"
            )
            return _with_failures(outcome, failures)

        self._transition(SimulationState.DONE)
        logger.error(f"All simulation strategies failed, last error: {last_error}")
        return SimulationOutcome(
            succeeded=False,
            ledger_error=f"{type(last_error).__name__}: {last_error}",
            strategy=self.strategies[-1].name,
            hint=CHANGE_RPC_HINT,
            failed_attempts=tuple(failures),
        )


def _with_failures(outcome: SimulationOutcome, failures: list) -> SimulationOutcome:
    if not failures:
        return outcome
    return replace(outcome, failed_attempts=tuple(failures))


def create_simulation_engine(config: "PipelineConfig") -> SimulationEngine:
    """Native simulate first, raw JSON-RPC as the single fallback."""
    return SimulationEngine(
        [
            NativeSimulateStrategy(config.rpc_url, timeout=config.http_timeout),
            RawRpcSimulateStrategy(config.rpc_url, timeout=config.http_timeout),
        ]
    )
