"""Tests for key material loading and the signing stage."""

import base64
import json

import base58
import pytest
from solders.keypair import Keypair
from solders.message import to_bytes_versioned
from solders.signature import Signature

from swapsim.errors import ConfigError, DecodeError, SignError
from swapsim.routing.base import SerializedTransaction
from swapsim.signing.keys import keypair_from_secret, keypair_from_seed_phrase
from swapsim.signing.signer import (
    PreparedTransaction,
    SigningStage,
    SigningState,
    decode_transaction,
    sign_transaction,
)

MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


class TestKeypairFromSecret:
    """Tests for PRIVATE_KEY parsing."""

    def test_json_array_64_bytes(self, keypair):
        """Test a 64-byte JSON array secret."""
        raw = json.dumps(list(bytes(keypair)))
        assert keypair_from_secret(raw).pubkey() == keypair.pubkey()

    def test_json_array_32_byte_seed(self, keypair):
        """Test a 32-byte JSON array seed."""
        raw = json.dumps(list(range(32)))
        assert keypair_from_secret(raw).pubkey() == keypair.pubkey()

    def test_base58_64_bytes(self, keypair):
        """Test a 64-byte base58 secret."""
        raw = base58.b58encode(bytes(keypair)).decode()
        assert keypair_from_secret(raw).pubkey() == keypair.pubkey()

    def test_base58_32_byte_seed(self, keypair):
        """Test a 32-byte base58 seed."""
        raw = base58.b58encode(bytes(range(32))).decode()
        assert keypair_from_secret(raw).pubkey() == keypair.pubkey()

    def test_surrounding_whitespace(self, keypair):
        """Test whitespace around the secret."""
        raw = "  " + base58.b58encode(bytes(keypair)).decode() + "\n"
        assert keypair_from_secret(raw).pubkey() == keypair.pubkey()

    def test_json_array_bad_length(self):
        """Test a JSON array of the wrong length."""
        with pytest.raises(ConfigError, match="not 32 or 64"):
            keypair_from_secret(json.dumps([1, 2, 3]))

    def test_json_array_out_of_range(self):
        """Test JSON array values outside a byte."""
        with pytest.raises(ConfigError):
            keypair_from_secret(json.dumps([256] * 32))

    def test_base58_bad_length(self):
        """Test base58 of the wrong length."""
        with pytest.raises(ConfigError, match="not 32 or 64"):
            keypair_from_secret(base58.b58encode(bytes(10)).decode())

    def test_not_base58(self):
        """Test a secret that is not base58."""
        with pytest.raises(ConfigError):
            keypair_from_secret("0OIl-not-base58")


class TestKeypairFromSeedPhrase:
    """Tests for BIP39 seed phrase derivation."""

    def test_deterministic(self):
        """Test deterministic seed phrase derivation."""
        first = keypair_from_seed_phrase(MNEMONIC)
        second = keypair_from_seed_phrase(MNEMONIC)

        assert first.pubkey() == second.pubkey()

    def test_index_changes_account(self):
        """Test that the account index changes the key."""
        assert keypair_from_seed_phrase(MNEMONIC, index=0).pubkey() != keypair_from_seed_phrase(
            MNEMONIC, index=1
        ).pubkey()

    def test_invalid_phrase(self):
        """Test rejection of an invalid mnemonic."""
        with pytest.raises(ConfigError):
            keypair_from_seed_phrase("not a real mnemonic at all")


class TestDecodeTransaction:
    """Tests for decode_transaction."""

    def test_decode(self, unsigned_tx, keypair):
        """Test decoding a valid transaction."""
        tx = decode_transaction(unsigned_tx)
        assert tx.message.account_keys[0] == keypair.pubkey()

    def test_not_base64(self):
        """Test rejection of non-base64 input."""
        with pytest.raises(DecodeError):
            decode_transaction("***not base64***")

    def test_not_a_transaction(self):
        """Test rejection of base64 that is not a transaction."""
        with pytest.raises(DecodeError):
            decode_transaction(base64.b64encode(b"\x01\x02\x03").decode())


class TestSigningStage:
    """Tests for the Unsigned/Signed transition."""

    def test_without_key_payload_untouched(self, unsigned_tx):
        """Test that the payload is unchanged without a key."""
        prepared = SigningStage().prepare(SerializedTransaction(swap_transaction=unsigned_tx))

        assert prepared.state == SigningState.UNSIGNED
        assert not prepared.is_signed
        assert prepared.payload == unsigned_tx
        assert prepared.transaction is not None
        assert prepared.transaction.signatures[0] == Signature.default()

    def test_without_key_undecodable_payload_still_simulated(self):
        """Test that decode failure is not fatal without a key."""
        prepared = SigningStage().prepare(SerializedTransaction(swap_transaction="bm90IGEgdHg="))

        assert prepared.state == SigningState.UNSIGNED
        assert prepared.payload == "bm90IGEgdHg="
        assert prepared.transaction is None

    def test_with_key_signs(self, unsigned_tx, keypair):
        """Test signing with a key."""
        prepared = SigningStage(keypair).prepare(SerializedTransaction(swap_transaction=unsigned_tx))

        assert prepared.state == SigningState.SIGNED
        assert prepared.is_signed
        assert prepared.payload != unsigned_tx

        tx = prepared.transaction
        expected = keypair.sign_message(to_bytes_versioned(tx.message))
        assert tx.signatures[0] == expected
        # Payload is the signed transaction
        assert bytes(decode_transaction(prepared.payload)) == bytes(tx)

    def test_with_key_malformed_payload(self, keypair):
        """Test that decode failure is fatal with a key."""
        with pytest.raises(DecodeError):
            SigningStage(keypair).prepare(SerializedTransaction(swap_transaction="%%%"))

    def test_wrong_signer(self, unsigned_tx):
        """Test signing with a key that is not the fee payer."""
        stranger = Keypair()
        with pytest.raises(SignError):
            SigningStage(stranger).prepare(SerializedTransaction(swap_transaction=unsigned_tx))

    def test_never_signed_twice(self, unsigned_tx, keypair):
        """Test that a signed transaction cannot be signed again."""
        prepared = SigningStage(keypair).prepare(SerializedTransaction(swap_transaction=unsigned_tx))

        with pytest.raises(SignError, match="already signed"):
            sign_transaction(prepared, keypair)

    def test_sign_requires_decoded_transaction(self, keypair):
        """Test signing without a decoded transaction."""
        prepared = PreparedTransaction(state=SigningState.UNSIGNED, payload="AAAA")

        with pytest.raises(SignError):
            sign_transaction(prepared, keypair)
