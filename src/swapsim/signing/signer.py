"""Local signing of aggregator-built transactions.

A prepared transaction is either UNSIGNED (no key material, payload left
byte-identical to the aggregator's) or SIGNED (decoded, signed once with the
local keypair, re-serialized). Nothing is broadcast.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from swapsim.errors import DecodeError, SignError
from swapsim.routing.base import SerializedTransaction

logger = logging.getLogger(__name__)


class SigningState(str, Enum):
    """Signature state of a prepared transaction."""

    UNSIGNED = "unsigned"
    SIGNED = "signed"


@dataclass(frozen=True)
class PreparedTransaction:
    """Transaction ready for simulation.

    Attributes:
        state: Whether a local signature is attached
        payload: Base64 wire bytes handed to the raw RPC fallback
        transaction: Decoded transaction for the native simulate call,
            None when the unsigned payload could not be decoded
    """

    state: SigningState
    payload: str
    transaction: Optional[VersionedTransaction] = None

    @property
    def is_signed(self) -> bool:
        return self.state == SigningState.SIGNED


def decode_transaction(payload: str) -> VersionedTransaction:
    """Deserialize a base64 versioned transaction.

    Raises:
        DecodeError: If the payload is not base64 or not a valid transaction
    """
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Transaction payload is not valid base64: {e}") from e

    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        raise DecodeError(f"Failed to deserialize VersionedTransaction: {e}") from e


def encode_transaction(transaction: VersionedTransaction) -> str:
    """Serialize a transaction to base64 wire format."""
    return base64.b64encode(bytes(transaction)).decode()


def sign_transaction(prepared: PreparedTransaction, keypair: Keypair) -> PreparedTransaction:
    """Attach the keypair's signature to an unsigned transaction.

    Raises:
        SignError: If the transaction is already signed, was never decoded,
            or the keypair is not a required signer
    """
    if prepared.is_signed:
        raise SignError("Transaction is already signed")
    if prepared.transaction is None:
        raise SignError("Transaction must be decoded before signing")

    try:
        signed = VersionedTransaction(prepared.transaction.message, [keypair])
    except Exception as e:
        raise SignError(f"Failed to sign transaction: {e}") from e

    logger.info(f"Signed transaction locally with {keypair.pubkey()}")
    return replace(
        prepared,
        state=SigningState.SIGNED,
        payload=encode_transaction(signed),
        transaction=signed,
    )


class SigningStage:
    """Signs built transactions when key material is configured."""

    def __init__(self, keypair: Optional[Keypair] = None):
        self.keypair = keypair

    @property
    def enabled(self) -> bool:
        return self.keypair is not None

    def prepare(self, built: SerializedTransaction) -> PreparedTransaction:
        """Produce the transaction to simulate.

        Without key material the payload is kept as returned and decoding is
        best effort. With key material, decode and sign failures are fatal.

        Raises:
            DecodeError: Malformed payload while signing is enabled
            SignError: Local signing failed
        """
        unsigned = PreparedTransaction(state=SigningState.UNSIGNED, payload=built.swap_transaction)

        if not self.enabled:
            try:
                transaction = decode_transaction(built.swap_transaction)
            except DecodeError as e:
                logger.warning(f"Unsigned payload could not be decoded, raw RPC only: {e}")
                return unsigned
            return replace(unsigned, transaction=transaction)

        logger.info("swapTransaction received. Deserializing and signing locally...")
        transaction = decode_transaction(built.swap_transaction)
        return sign_transaction(replace(unsigned, transaction=transaction), self.keypair)
