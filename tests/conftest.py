"""Pytest configuration and fixtures."""

import base64
from io import StringIO

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

from swapsim.config import PipelineConfig, get_settings
from swapsim.reporter import Reporter
from swapsim.routing.base import SwapIntent

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

CONFIG_ENV_VARS = [
    "INPUT_MINT",
    "OUTPUT_MINT",
    "AMOUNT_UI",
    "INPUT_DECIMALS",
    "SLIPPAGE_BPS",
    "RESTRICT_INTERMEDIATE",
    "ONLY_DIRECT_ROUTES",
    "MAX_ACCOUNTS",
    "PRIVATE_KEY",
    "WALLET_SEED_PHRASE",
    "PUBLIC_KEY",
    "RPC_URL",
    "JUPITER_API_URL",
    "JUPITER_API_KEY",
    "HTTP_TIMEOUT",
    "DEBUG",
]


def build_unsigned_transaction(payer: Pubkey) -> str:
    """Base64 v0 transfer transaction with an empty signature slot."""
    ix = transfer(TransferParams(from_pubkey=payer, to_pubkey=Pubkey.new_unique(), lamports=1_000))
    message = MessageV0.try_compile(payer, [ix], [], Hash.default())
    tx = VersionedTransaction.populate(message, [Signature.default()])
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the caller's environment and cached settings."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def keypair() -> Keypair:
    return Keypair.from_seed(bytes(range(32)))


@pytest.fixture
def unsigned_tx(keypair) -> str:
    return build_unsigned_transaction(keypair.pubkey())


@pytest.fixture
def intent() -> SwapIntent:
    return SwapIntent(input_mint=SOL_MINT, output_mint=USDC_MINT, ui_amount="0.01", decimals=9)


@pytest.fixture
def unsigned_config(intent, keypair) -> PipelineConfig:
    return PipelineConfig(intent=intent, user_public_key=str(keypair.pubkey()))


@pytest.fixture
def signed_config(intent, keypair) -> PipelineConfig:
    return PipelineConfig(intent=intent, user_public_key=str(keypair.pubkey()), keypair=keypair)


@pytest.fixture
def output() -> StringIO:
    return StringIO()


@pytest.fixture
def reporter(output) -> Reporter:
    return Reporter(stream=output)
