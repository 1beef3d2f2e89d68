"""Key material loading and local transaction signing."""

from swapsim.signing.keys import keypair_from_bytes, keypair_from_secret, keypair_from_seed_phrase
from swapsim.signing.signer import (
    PreparedTransaction,
    SigningStage,
    SigningState,
    decode_transaction,
    encode_transaction,
    sign_transaction,
)

__all__ = [
    "keypair_from_bytes",
    "keypair_from_secret",
    "keypair_from_seed_phrase",
    "PreparedTransaction",
    "SigningStage",
    "SigningState",
    "decode_transaction",
    "encode_transaction",
    "sign_transaction",
]
