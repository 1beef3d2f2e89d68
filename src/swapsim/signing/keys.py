"""Solana key material loading.

Supports:
- JSON array of bytes (the solana-keygen file format)
- base58 string (Phantom/Solflare export)
- BIP39 seed phrase (m/44'/501'/0'/0', the Trust Wallet/Phantom path)

Both raw formats accept a 64-byte secret key or a 32-byte seed.
"""

import json
import logging

import base58
from solders.keypair import Keypair

from swapsim.errors import ConfigError

logger = logging.getLogger(__name__)


def keypair_from_bytes(secret: bytes) -> Keypair:
    """Build a keypair from a 64-byte secret key or a 32-byte seed."""
    if len(secret) == 64:
        try:
            return Keypair.from_bytes(secret)
        except ValueError as e:
            raise ConfigError(f"PRIVATE_KEY is not a valid ed25519 secret key: {e}") from e
    if len(secret) == 32:
        return Keypair.from_seed(secret)
    raise ConfigError(f"PRIVATE_KEY length {len(secret)} not 32 or 64 bytes.")


def keypair_from_secret(raw: str) -> Keypair:
    """Parse PRIVATE_KEY as a JSON byte array, falling back to base58.

    Raises:
        ConfigError: If the value matches neither format or has a bad length
    """
    raw = raw.strip()

    try:
        parsed = json.loads(raw)
    except ValueError:
        parsed = None

    if isinstance(parsed, list):
        try:
            secret = bytes(parsed)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"PRIVATE_KEY JSON array must contain bytes (0-255): {e}") from e
        logger.debug("Loaded signer from JSON byte array")
        return keypair_from_bytes(secret)

    try:
        secret = base58.b58decode(raw)
    except ValueError as e:
        raise ConfigError(
            f"Failed to decode PRIVATE_KEY as base58 or parse JSON array. Error: {e}"
        ) from e

    logger.debug("Loaded signer from base58 secret")
    return keypair_from_bytes(secret)


def keypair_from_seed_phrase(seed_phrase: str, index: int = 0) -> Keypair:
    """Derive a Solana keypair from a BIP39 seed phrase.

    Uses standard BIP44 path: m/44'/501'/index'/0'
    """
    from bip_utils import Bip39SeedGenerator, Bip44, Bip44Changes, Bip44Coins

    try:
        seed = Bip39SeedGenerator(seed_phrase).Generate()
    except Exception as e:
        raise ConfigError(f"WALLET_SEED_PHRASE is not a valid BIP39 mnemonic: {e}") from e

    bip44 = Bip44.FromSeed(seed, Bip44Coins.SOLANA)
    account = bip44.Purpose().Coin().Account(index).Change(Bip44Changes.CHAIN_EXT)
    private_key = account.PrivateKey().Raw().ToBytes()

    return Keypair.from_seed(private_key[:32])
