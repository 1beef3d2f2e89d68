"""Jupiter swap API client.

Quotes a swap and materializes the quote into a transaction addressed to a
wallet. Nothing is signed or sent here.
API docs: https://dev.jup.ag/docs/swap-api
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx

from swapsim.errors import NetworkError
from swapsim.routing.base import SwapIntent

if TYPE_CHECKING:
    from swapsim.config import PipelineConfig

logger = logging.getLogger(__name__)

JUPITER_LITE_API = "https://lite-api.jup.ag/swap/v1"


class JupiterClient:
    """Client for the Jupiter /quote and /swap endpoints.

    Errors are never retried: a non-success response raises NetworkError
    with the status and body exactly as received.
    """

    def __init__(
        self,
        base_url: str = JUPITER_LITE_API,
        api_key: Optional[str] = None,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Jupiter client.

        Args:
            base_url: Swap API base URL (without trailing slash)
            api_key: Optional API key for the paid endpoints
            timeout: Request timeout in seconds (None waits forever)
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        """Get API headers."""
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def build_quote_params(intent: SwapIntent, amount: int) -> dict:
        """Query parameters for /quote; optional flags only when set."""
        params = {
            "inputMint": intent.input_mint,
            "outputMint": intent.output_mint,
            "amount": str(amount),
            "slippageBps": str(intent.slippage_bps),
        }
        if intent.restrict_intermediate_tokens:
            params["restrictIntermediateTokens"] = "true"
        if intent.only_direct_routes:
            params["onlyDirectRoutes"] = "true"
        if intent.max_accounts:
            params["maxAccounts"] = str(intent.max_accounts)
        return params

    async def get_quote(self, intent: SwapIntent, amount: int) -> Any:
        """Request a best-route quote.

        Args:
            intent: Swap intent (mints, slippage, routing flags)
            amount: Input amount in atomic units

        Returns:
            Parsed JSON quote response, unvalidated

        Raises:
            NetworkError: On non-2xx status, transport failure or invalid JSON
        """
        params = self.build_quote_params(intent, amount)
        logger.info(
            f"Requesting Jupiter quote: {amount} {intent.input_mint} -> {intent.output_mint} "
            f"(slippage: {intent.slippage_bps} bps)"
        )
        return await self._request("Quote request", "GET", "/quote", params=params)

    async def build_swap(self, quote_response: Any, user_public_key: str) -> Any:
        """Materialize a quote into a swap transaction for a wallet.

        Args:
            quote_response: Quote exactly as returned by get_quote
            user_public_key: Wallet that will sign and pay for the swap

        Returns:
            Parsed JSON build response, unvalidated

        Raises:
            NetworkError: On non-2xx status, transport failure or invalid JSON
        """
        logger.info(f"Building Jupiter swap for {user_public_key}")
        return await self._request(
            "Build swap",
            "POST",
            "/swap",
            json={
                "quoteResponse": quote_response,
                "userPublicKey": user_public_key,
            },
        )

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        headers = self._get_headers()
        if method == "POST":
            headers["content-type"] = "application/json"

        try:
            async with self._client() as client:
                response = await client.request(
                    method, f"{self.base_url}{path}", headers=headers, **kwargs
                )
        except httpx.HTTPError as e:
            raise NetworkError(f"{operation} failed: {type(e).__name__}: {e}") from e

        if not response.is_success:
            logger.warning(f"Jupiter API error: {response.status_code} - {response.text}")
            raise NetworkError.from_response(
                operation, response.status_code, response.reason_phrase, response.text
            )

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(
                f"{operation} returned invalid JSON: {e}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
            ) from e


def create_jupiter_client(config: "PipelineConfig") -> JupiterClient:
    """Create a Jupiter client from a PipelineConfig."""
    return JupiterClient(
        base_url=config.jupiter_api_url,
        api_key=config.jupiter_api_key,
        timeout=config.http_timeout,
    )
