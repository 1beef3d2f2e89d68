"""Primary strategy: the RPC client's own simulateTransaction call.

Letting solana-py build the request keeps encoding and config fields in line
with what the node expects, so this path is always tried first.
"""

import json
import logging
from typing import Callable, Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed

from swapsim.signing.signer import PreparedTransaction
from swapsim.simulation.base import (
    SimulationAttemptError,
    SimulationOutcome,
    SimulationStrategy,
)

logger = logging.getLogger(__name__)


class NativeSimulateStrategy(SimulationStrategy):
    """Simulate through solana.rpc.async_api.AsyncClient."""

    def __init__(
        self,
        rpc_url: str,
        timeout: Optional[float] = 30.0,
        client_factory: Optional[Callable[[], AsyncClient]] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._client_factory = client_factory or self._default_client

    @property
    def name(self) -> str:
        return "native"

    def _default_client(self) -> AsyncClient:
        if self.timeout is None:
            return AsyncClient(self.rpc_url, commitment=Confirmed)
        return AsyncClient(self.rpc_url, commitment=Confirmed, timeout=self.timeout)

    async def simulate(self, prepared: PreparedTransaction) -> SimulationOutcome:
        if prepared.transaction is None:
            raise SimulationAttemptError("No decoded transaction available for native simulation")

        logger.info(f"Attempting simulateTransaction via RPC client ({prepared.state.value})")

        async with self._client_factory() as client:
            resp = await client.simulate_transaction(prepared.transaction, commitment=Confirmed)

        value = getattr(resp, "value", None)
        if value is None:
            raise SimulationAttemptError(f"Unexpected simulateTransaction response: {resp}")

        logs = tuple(value.logs) if value.logs is not None else None
        err = value.err

        return SimulationOutcome(
            succeeded=err is None,
            logs=logs,
            ledger_error=str(err) if err is not None else None,
            strategy=self.name,
            raw=json.loads(resp.to_json()),
            units_consumed=value.units_consumed,
        )
