"""Transaction simulation with an ordered list of strategies.

Strategies:
- native: solana-py AsyncClient.simulate_transaction (primary)
- raw_rpc: JSON-RPC simulateTransaction over httpx (fallback)
"""

from swapsim.simulation.base import (
    SimulationAttemptError,
    SimulationOutcome,
    SimulationState,
    SimulationStrategy,
    extract_logs,
)
from swapsim.simulation.engine import SimulationEngine, create_simulation_engine
from swapsim.simulation.native import NativeSimulateStrategy
from swapsim.simulation.rpc import RawRpcSimulateStrategy, build_simulate_request

__all__ = [
    "SimulationAttemptError",
    "SimulationOutcome",
    "SimulationState",
    "SimulationStrategy",
    "extract_logs",
    "SimulationEngine",
    "create_simulation_engine",
    "NativeSimulateStrategy",
    "RawRpcSimulateStrategy",
    "build_simulate_request",
]
