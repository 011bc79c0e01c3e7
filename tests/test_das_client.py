import asyncio
from typing import Any, Dict, List

import pytest
from solders.pubkey import Pubkey

from ingestion.assets.das_client import HeliusDasClient, IndexerError


def _item() -> Dict[str, Any]:
    return {
        "id": str(Pubkey.new_unique()),
        "interface": "V1_NFT",
        "content": {"json_uri": "", "metadata": {"name": "n", "symbol": "s", "token_standard": "NonFungible"}},
        "grouping": [],
        "creators": [],
        "compression": {"compressed": False},
        "ownership": {"owner": str(Pubkey.new_unique()), "frozen": False, "delegated": False},
    }


class FakeIndexer:
    """Serves searchAssets pages of fixed size from an in-memory list."""

    def __init__(self, total_items: int, page_size: int, fail_on_page: int = 0):
        self.items = [_item() for _ in range(total_items)]
        self.page_size = page_size
        self.fail_on_page = fail_on_page
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"method": method, **params})
        if method == "getAssetBatch":
            by_id = {i["id"]: i for i in self.items}
            return {"result": [by_id.get(i) for i in params["ids"]]}
        page = params["page"]
        if page == self.fail_on_page:
            return {"error": {"code": -32000, "message": "boom"}}
        start = (page - 1) * self.page_size
        chunk = self.items[start:start + self.page_size]
        return {"result": {"total": len(chunk), "limit": self.page_size, "page": page, "items": chunk}}


def _search(client: HeliusDasClient):
    return asyncio.run(client.fetch_helius_assets(
        wallet_address=Pubkey.new_unique(),
        collection_address=Pubkey.new_unique(),
    ))


def test_search_single_short_page():
    indexer = FakeIndexer(total_items=3, page_size=10)
    assets = _search(HeliusDasClient("http://das", page_size=10, http_callable=indexer))
    assert len(assets) == 3
    assert len(indexer.calls) == 1


def test_search_paginates_until_short_page():
    indexer = FakeIndexer(total_items=25, page_size=10)
    assets = _search(HeliusDasClient("http://das", page_size=10, http_callable=indexer))
    assert len(assets) == 25
    assert [c["page"] for c in indexer.calls] == [1, 2, 3]


def test_search_exact_multiple_terminates():
    indexer = FakeIndexer(total_items=20, page_size=10)
    assets = _search(HeliusDasClient("http://das", page_size=10, http_callable=indexer))
    assert len(assets) == 20
    # ceil(20 / 10) + 1 requests at most
    assert len(indexer.calls) <= 3


def test_search_params():
    indexer = FakeIndexer(total_items=0, page_size=10)
    owner = Pubkey.new_unique()
    collection = Pubkey.new_unique()
    client = HeliusDasClient("http://das", page_size=10, http_callable=indexer)
    assert asyncio.run(client.search_assets(owner, collection)) == []
    call = indexer.calls[0]
    assert call["method"] == "searchAssets"
    assert call["ownerAddress"] == str(owner)
    assert call["grouping"] == ["collection", str(collection)]
    assert call["limit"] == 10


def test_search_error_returns_gathered_pages():
    indexer = FakeIndexer(total_items=25, page_size=10, fail_on_page=2)
    assets = _search(HeliusDasClient("http://das", page_size=10, http_callable=indexer))
    assert len(assets) == 10


def test_search_error_on_first_page_returns_empty():
    indexer = FakeIndexer(total_items=5, page_size=10, fail_on_page=1)
    assert _search(HeliusDasClient("http://das", page_size=10, http_callable=indexer)) == []


def test_batch_drops_nulls_and_unparseable():
    indexer = FakeIndexer(total_items=2, page_size=10)
    indexer.items[1]["id"] = "bogus"
    ids = [indexer.items[0]["id"], str(Pubkey.new_unique()), "bogus"]
    client = HeliusDasClient("http://das", http_callable=indexer)
    assets = asyncio.run(client.fetch_helius_assets(mint_list=ids))
    assert [str(a.mint) for a in assets] == [indexer.items[0]["id"]]


def test_batch_is_chunked():
    indexer = FakeIndexer(total_items=0, page_size=10)
    client = HeliusDasClient("http://das", http_callable=indexer)
    asyncio.run(client.get_asset_batch([Pubkey.new_unique() for _ in range(1500)]))
    assert [len(c["ids"]) for c in indexer.calls] == [1000, 500]


def test_batch_error_returns_empty():
    def failing(method, params):
        raise IndexerError("connection refused")

    client = HeliusDasClient("http://das", http_callable=failing)
    assert asyncio.run(client.get_asset_batch([Pubkey.new_unique()])) == []


def test_rate_limit_is_retried():
    responses = [
        {"error": {"code": -32009, "message": "rate limited"}},
        {"error": {"code": -32009, "message": "rate limited"}},
        {"result": []},
    ]
    calls = []

    async def flaky(method, params):
        calls.append(method)
        return responses[len(calls) - 1]

    client = HeliusDasClient("http://das", initial_delay_ms=1, http_callable=flaky)
    assert asyncio.run(client.get_asset_batch([Pubkey.new_unique()])) == []
    assert len(calls) == 3


def test_rate_limit_retries_are_bounded():
    calls = []

    def always_limited(method, params):
        calls.append(method)
        return {"error": {"code": -32009, "message": "rate limited"}}

    client = HeliusDasClient("http://das", max_retries=2, initial_delay_ms=1, http_callable=always_limited)
    assert asyncio.run(client.get_asset_batch([Pubkey.new_unique()])) == []
    assert len(calls) == 3


def test_requires_lookup_arguments():
    client = HeliusDasClient("http://das", http_callable=lambda m, p: {"result": []})
    with pytest.raises(ValueError):
        asyncio.run(client.fetch_helius_assets(wallet_address=Pubkey.new_unique()))


def test_batch_skips_malformed_records():
    good = _item()
    null_leaf = _item()
    null_leaf["compression"] = {
        "compressed": True,
        "leaf_id": None,
        "data_hash": str(Pubkey.new_unique()),
        "creator_hash": str(Pubkey.new_unique()),
        "asset_hash": str(Pubkey.new_unique()),
        "tree": str(Pubkey.new_unique()),
    }
    bad_grouping = _item()
    bad_grouping["grouping"] = ["collection"]

    client = HeliusDasClient(
        "http://das",
        http_callable=lambda m, p: {"result": [good, null_leaf, bad_grouping]},
    )
    assets = asyncio.run(client.get_asset_batch([good["id"], null_leaf["id"], bad_grouping["id"]]))
    assert [str(a.mint) for a in assets] == [good["id"]]


def test_batch_non_list_result_returns_empty():
    client = HeliusDasClient("http://das", http_callable=lambda m, p: {"result": {"items": []}})
    assert asyncio.run(client.get_asset_batch([Pubkey.new_unique()])) == []


@pytest.mark.parametrize("result", [[_item()], "oops", {"total": 1, "items": "oops"}])
def test_search_malformed_result_returns_empty(result):
    client = HeliusDasClient("http://das", http_callable=lambda m, p: {"result": result})
    assert _search(client) == []


def test_non_object_rpc_error_returns_empty():
    client = HeliusDasClient("http://das", http_callable=lambda m, p: {"error": "boom"})
    assert asyncio.run(client.get_asset_batch([Pubkey.new_unique()])) == []
