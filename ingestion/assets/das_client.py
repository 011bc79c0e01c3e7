"""
ingestion/assets/das_client.py

Helius Digital Asset Standard (DAS) API client.

Two lookup modes:
- getAssetBatch: explicit id list, chunked by BATCH_SIZE, null entries dropped
- searchAssets: owner + collection, paginated until a page reports fewer
  than `limit` items

Public fetch methods never raise on indexer failure: errors are logged and
whatever was gathered so far is returned.
"""
import asyncio
import inspect
import itertools
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

import aiohttp
from solders.pubkey import Pubkey

from .normalization import Asset, AssetParseError, parse_helius_asset

logger = logging.getLogger(__name__)


DEFAULT_PAGE_SIZE = 1000  # Max allowed by DAS API
BATCH_SIZE = 1000  # For getAssetBatch

# Retry configuration
MAX_RETRIES = 3
INITIAL_DELAY_MS = 100
RATE_LIMIT_CODE = -32009

HttpCallable = Callable[[str, Dict[str, Any]], Union[Dict[str, Any], Awaitable[Dict[str, Any]]]]
AddressLike = Union[Pubkey, str]


class HeliusDasClient:
    """
    Async client for the Helius DAS API.

    Usable as an async context manager. Tests inject `http_callable`
    (method, params) -> JSON-RPC response dict, sync or async.
    """

    def __init__(
        self,
        rpc_url: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_retries: int = MAX_RETRIES,
        initial_delay_ms: int = INITIAL_DELAY_MS,
        timeout_seconds: float = 30.0,
        http_callable: Optional[HttpCallable] = None,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._rpc_url = rpc_url
        self._page_size = min(page_size, DEFAULT_PAGE_SIZE)
        self._max_retries = max_retries
        self._initial_delay_ms = initial_delay_ms
        self._timeout_seconds = timeout_seconds
        self._http_callable = http_callable
        self._session: Optional[aiohttp.ClientSession] = None
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config, http_callable: Optional[HttpCallable] = None) -> "HeliusDasClient":
        return cls(
            rpc_url=config.indexer_url,
            page_size=config.das_page_size,
            max_retries=config.das_max_retries,
            timeout_seconds=config.request_timeout_seconds,
            http_callable=http_callable,
        )

    @property
    def page_size(self) -> int:
        return self._page_size

    async def __aenter__(self) -> "HeliusDasClient":
        if self._http_callable is None and self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _post(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if self._http_callable is not None:
            response = self._http_callable(method, params)
            if inspect.isawaitable(response):
                response = await response
            return response

        if self._session is None:
            raise RuntimeError("HeliusDasClient session not initialized. Use async context manager.")
        payload = {
            "jsonrpc": "2.0",
            "id": f"das-{next(self._ids)}",
            "method": method,
            "params": params,
        }
        async with self._session.post(self._rpc_url, json=payload) as resp:
            if resp.status == 429:
                raise RateLimitedError(f"HTTP 429 from {method}")
            resp.raise_for_status()
            return await resp.json()

    async def _make_request(self, method: str, params: Dict[str, Any]) -> Any:
        """
        JSON-RPC call with exponential backoff on rate limiting.

        Returns:
            The `result` member of the response

        Raises:
            IndexerError: on RPC errors, transport errors or exhausted retries
        """
        delay_ms = self._initial_delay_ms

        for attempt in range(self._max_retries + 1):
            try:
                response = await self._post(method, params)
            except RateLimitedError as e:
                if attempt < self._max_retries:
                    logger.warning(f"[das] Rate limited on {method}, retrying in {delay_ms}ms")
                    await asyncio.sleep(delay_ms / 1000.0)
                    delay_ms *= 2
                    continue
                raise IndexerError(f"{method}: rate limit retries exhausted") from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise IndexerError(f"{method}: {e}") from e

            error = response.get("error") if isinstance(response, dict) else None
            if error:
                if not isinstance(error, dict):
                    raise IndexerError(f"RPC error: {error!r}")
                error_msg = error.get("message", "Unknown error")
                error_code = error.get("code", -1)
                if error_code == RATE_LIMIT_CODE or "rate limit" in str(error_msg).lower():
                    if attempt < self._max_retries:
                        logger.warning(f"[das] Rate limited on {method}, retrying in {delay_ms}ms")
                        await asyncio.sleep(delay_ms / 1000.0)
                        delay_ms *= 2
                        continue
                raise IndexerError(f"RPC error {error_code}: {error_msg}")

            if not isinstance(response, dict) or "result" not in response:
                raise IndexerError(f"{method}: malformed response")
            return response["result"]

        raise IndexerError(f"{method}: rate limit retries exhausted")

    def _parse_items(self, items: Sequence[Any]) -> List[Asset]:
        assets: List[Asset] = []
        for item in items:
            if item is None:
                continue
            try:
                assets.append(parse_helius_asset(item))
            except AssetParseError as e:
                logger.warning(f"[das] Skipping unparseable asset: {e}")
        return assets

    async def get_asset_batch(self, asset_ids: Sequence[AddressLike]) -> List[Asset]:
        """Resolve explicit asset ids, in chunks of BATCH_SIZE."""
        ids = [str(a) for a in asset_ids]
        assets: List[Asset] = []

        for i in range(0, len(ids), BATCH_SIZE):
            chunk = ids[i:i + BATCH_SIZE]
            try:
                result = await self._make_request("getAssetBatch", {"ids": chunk})
                if result is not None and not isinstance(result, list):
                    raise IndexerError(f"getAssetBatch: expected a list, got {type(result).__name__}")
            except IndexerError as e:
                logger.error(f"[das] Failed to fetch asset batch: {e}")
                return []
            assets.extend(self._parse_items(result or []))

        logger.info(f"[das] Retrieved {len(assets)} assets from batch of {len(ids)}")
        return assets

    async def search_assets(
        self,
        wallet_address: AddressLike,
        collection_address: AddressLike,
    ) -> List[Asset]:
        """
        All assets of `wallet_address` grouped under `collection_address`.

        Pagination stops on the first page whose total or item count is
        below the page size; a failing page ends the search with the pages
        gathered so far.
        """
        items: List[Any] = []
        page = 1

        while True:
            try:
                result = await self._make_request(
                    "searchAssets",
                    {
                        "ownerAddress": str(wallet_address),
                        "grouping": ["collection", str(collection_address)],
                        "page": page,
                        "limit": self._page_size,
                    },
                )
                if not isinstance(result, dict):
                    raise IndexerError(f"searchAssets: expected an object, got {type(result).__name__}")
                page_items = result.get("items") or []
                if not isinstance(page_items, list):
                    raise IndexerError(f"searchAssets: items must be a list, got {type(page_items).__name__}")
            except IndexerError as e:
                logger.error(f"[das] searchAssets failed on page {page}: {e}")
                break

            items.extend(page_items)
            total = result.get("total", len(page_items))
            logger.debug(f"[das] Fetched page {page}, total: {len(items)}")

            if total != self._page_size or len(page_items) < self._page_size:
                break
            page += 1

        assets = self._parse_items(items)
        logger.info(f"[das] Retrieved {len(assets)} assets for {wallet_address}")
        return assets

    async def fetch_helius_assets(
        self,
        mint_list: Optional[Sequence[AddressLike]] = None,
        wallet_address: Optional[AddressLike] = None,
        collection_address: Optional[AddressLike] = None,
    ) -> List[Asset]:
        """Batch lookup when `mint_list` is given, owner/collection search otherwise."""
        if mint_list is not None:
            return await self.get_asset_batch(mint_list)
        if wallet_address is None or collection_address is None:
            raise ValueError("fetch_helius_assets needs mint_list or wallet_address + collection_address")
        return await self.search_assets(wallet_address, collection_address)


class IndexerError(Exception):
    """DAS request failed."""
    pass


class RateLimitedError(IndexerError):
    """HTTP 429 from the indexer."""
    pass
