"""Simulation result types and the strategy interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from swapsim.signing.signer import PreparedTransaction

# Searched in order; the first path that holds a logs list wins
LOG_PATHS: list[tuple[str, ...]] = [
    ("result", "value", "logs"),
    ("result", "logs"),
    ("value", "logs"),
]

NO_LOGS_MESSAGE = "No logs returned"


class SimulationState(str, Enum):
    """Progress of one simulation run."""

    NOT_STARTED = "not_started"
    PRIMARY_ATTEMPTED = "primary_attempted"
    FALLBACK_ATTEMPTED = "fallback_attempted"
    DONE = "done"


class SimulationAttemptError(Exception):
    """A strategy could not obtain a simulation result."""

    pass


@dataclass(frozen=True)
class SimulationOutcome:
    """Final result of simulating a transaction.

    Attributes:
        succeeded: Whether the ledger accepted the simulated execution
        logs: Program logs, None when the node returned none
        ledger_error: Rejection payload, or the transport error text when
            every strategy failed; set iff succeeded is False
        strategy: Name of the strategy that produced the result
        raw: Raw response for dumping
        units_consumed: Compute units reported by the node
        hint: Operator-facing advice
        failed_attempts: (strategy, error) for each strategy that raised
    """

    succeeded: bool
    logs: Optional[tuple[str, ...]] = None
    ledger_error: Any = None
    strategy: Optional[str] = None
    raw: Any = None
    units_consumed: Optional[int] = None
    hint: Optional[str] = None
    failed_attempts: tuple[tuple[str, str], ...] = field(default_factory=tuple)


def extract_logs(payload: Any) -> Optional[list[str]]:
    """Find program logs in a simulate response.

    Returns:
        The first logs list found along LOG_PATHS, or None
    """
    for path in LOG_PATHS:
        node = payload
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
            if node is None:
                break
        if node is not None:
            return list(node)
    return None


class SimulationStrategy(ABC):
    """One way of dry-running a transaction against the node."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name identifier."""
        pass

    @abstractmethod
    async def simulate(self, prepared: PreparedTransaction) -> SimulationOutcome:
        """Simulate the transaction.

        A ledger rejection is a normal outcome (succeeded=False). Raise only
        when no result could be obtained, so the next strategy is tried.

        Raises:
            Exception: Any failure to reach or parse the node
        """
        pass
