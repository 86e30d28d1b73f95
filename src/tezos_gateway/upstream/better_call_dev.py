"""Better Call Dev client: Tezos explorer REST API.

The dApps catalogue lives on the better-call.dev site rather than the API
host, and is only served to browser-looking requests.
"""

from __future__ import annotations

from typing import Any

from tezos_gateway.upstream.base import JsonApiClient

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:89.0) Gecko/20100101 Firefox/89.0",
    "Referer": "https://better-call.dev/dapps/list",
}


class BetterCallDevClient(JsonApiClient):
    """Async client for the Better Call Dev API."""

    def __init__(
        self,
        base_url: str = "https://api.better-call.dev/v1",
        dapps_url: str = "https://better-call.dev/v1/dapps",
        **kwargs: Any,
    ):
        super().__init__(base_url, **kwargs)
        self.dapps_url = dapps_url.rstrip("/")

    async def get_dapps(self) -> list[dict]:
        return await self._get_json(self.dapps_url, headers=BROWSER_HEADERS)

    async def get_dapp_details(self, slug: str) -> dict:
        return await self._get_json(f"{self.dapps_url}/{slug}", headers=BROWSER_HEADERS)

    async def get_series(
        self,
        addresses: list[str],
        period: str = "month",
        name: str = "users",
    ) -> list[list[int]]:
        """Fetch a mainnet stats series as ``[[timestamp_ms, value], ...]``.

        *period* is one of day/month/year, *name* one of users/operation.
        """
        return await self._get_json(
            "/stats/mainnet/series",
            params={"address": ",".join(addresses), "period": period, "name": name},
        )

    async def get_contract_tokens(
        self,
        network: str,
        address: str,
        token_id: str | None = None,
        size: int | None = None,
        offset: int | None = None,
    ) -> list[dict]:
        return await self._get_json(
            f"/contract/{network}/{address}/tokens",
            params={"size": size, "offset": offset, "token_id": token_id},
        )

    async def get_tokens_metadata(
        self,
        network: str,
        contract: str | None = None,
        token_id: str | None = None,
        size: int | None = None,
        offset: int | None = None,
    ) -> list[dict]:
        return await self._get_json(
            f"/tokens/{network}/metadata",
            params={"size": size, "offset": offset, "contract": contract, "token_id": token_id},
        )
