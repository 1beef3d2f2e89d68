"""Fallback strategy: raw JSON-RPC simulateTransaction.

Sends the base64 payload directly. Signature verification is skipped for
unsigned transactions and requested for signed ones.
"""

import logging
from typing import Any, Optional

import httpx

from swapsim.signing.signer import PreparedTransaction
from swapsim.simulation.base import (
    SimulationAttemptError,
    SimulationOutcome,
    SimulationStrategy,
    extract_logs,
)

logger = logging.getLogger(__name__)

UNSIGNED_NO_LOGS_HINT = (
    "No logs returned in unsigned RPC simulation. This RPC provider may not support "
    "sigVerify=false or may require different payloads. Try a standard Solana RPC "
    "(https://api.mainnet-beta.solana.com) or another provider."
)


def build_simulate_request(payload: str, sig_verify: bool, request_id: int = 1) -> dict:
    """JSON-RPC 2.0 body for simulateTransaction."""
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "simulateTransaction",
        "params": [
            payload,
            # Nodes assume base58 unless told otherwise
            {"sigVerify": sig_verify, "commitment": "confirmed", "encoding": "base64"},
        ],
    }


def _ledger_error(data: dict) -> Any:
    """JSON-RPC error object, or the transaction error inside the result."""
    if data.get("error") is not None:
        return data["error"]

    result = data.get("result")
    value = result.get("value") if isinstance(result, dict) else None
    if isinstance(value, dict):
        return value.get("err")
    return None


def _units_consumed(data: dict) -> Optional[int]:
    result = data.get("result")
    value = result.get("value") if isinstance(result, dict) else None
    return value.get("unitsConsumed") if isinstance(value, dict) else None


class RawRpcSimulateStrategy(SimulationStrategy):
    """Simulate by posting simulateTransaction to the RPC URL with httpx."""

    def __init__(
        self,
        rpc_url: str,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "raw_rpc"

    async def simulate(self, prepared: PreparedTransaction) -> SimulationOutcome:
        sig_verify = prepared.is_signed
        logger.info(f"Falling back to raw RPC simulateTransaction with sigVerify={str(sig_verify).lower()}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.rpc_url,
                headers={"content-type": "application/json"},
                json=build_simulate_request(prepared.payload, sig_verify),
            )
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise SimulationAttemptError(f"Unexpected RPC response: {data!r}")

        logs = extract_logs(data)
        ledger_error = _ledger_error(data)

        hint = None
        if logs is None:
            logger.warning("No logs found in raw RPC simulation response")
            if not sig_verify:
                hint = UNSIGNED_NO_LOGS_HINT

        return SimulationOutcome(
            succeeded=ledger_error is None,
            logs=tuple(logs) if logs is not None else None,
            ledger_error=ledger_error,
            strategy=self.name,
            raw=data,
            units_consumed=_units_consumed(data),
            hint=hint,
        )
