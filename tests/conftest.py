from types import SimpleNamespace
from typing import Any, List, Optional, Sequence

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import Transaction

from execution.transaction_sender import SendOptions, TransactionRejectedError


class FakeSender:
    """Records every submitted transaction instead of sending it."""

    def __init__(self, fail_labels: Sequence[str] = ()):
        self.sent: List[SimpleNamespace] = []
        self.rent_requests: List[int] = []
        self.fail_labels = set(fail_labels)

    async def get_minimum_balance_for_rent_exemption(self, space: int) -> int:
        self.rent_requests.append(space)
        return space * 10

    async def send_and_confirm(self, instructions, signers, options=SendOptions(), label="tx"):
        signature = Signature.new_unique()
        if label in self.fail_labels:
            raise TransactionRejectedError(signature, "custom program error: 0x1", label=label)
        self.sent.append(SimpleNamespace(
            instructions=list(instructions),
            signers=list(signers),
            options=options,
            label=label,
            signature=signature,
        ))
        return signature

    def labels(self) -> List[str]:
        return [tx.label for tx in self.sent]


class FakeRpcClient:
    """Minimal stand-in for solana.rpc.async_api.AsyncClient."""

    def __init__(self, err: Optional[Any] = None, statuses_missing: bool = False):
        self.err = err
        self.statuses_missing = statuses_missing
        self.raw_transactions: List[bytes] = []
        self.send_opts: List[Any] = []
        self.confirm_calls: List[SimpleNamespace] = []
        self.blockhash = Hash.new_unique()
        self.closed = False

    async def get_latest_blockhash(self, commitment=None):
        return SimpleNamespace(value=SimpleNamespace(
            blockhash=self.blockhash,
            last_valid_block_height=1234,
        ))

    async def send_raw_transaction(self, raw: bytes, opts=None):
        self.raw_transactions.append(raw)
        self.send_opts.append(opts)
        return SimpleNamespace(value=Transaction.from_bytes(raw).signatures[0])

    async def confirm_transaction(self, signature, commitment=None, last_valid_block_height=None):
        self.confirm_calls.append(SimpleNamespace(
            signature=signature,
            commitment=commitment,
            last_valid_block_height=last_valid_block_height,
        ))
        if self.statuses_missing:
            return SimpleNamespace(value=[])
        return SimpleNamespace(value=[SimpleNamespace(err=self.err)])

    async def get_minimum_balance_for_rent_exemption(self, space: int):
        return SimpleNamespace(value=space * 10)

    async def close(self):
        self.closed = True


class FakeDasClient:
    """Returns canned assets from fetch_helius_assets."""

    def __init__(self, assets=None):
        self.assets = list(assets or [])
        self.calls: List[dict] = []

    async def fetch_helius_assets(self, mint_list=None, wallet_address=None, collection_address=None):
        self.calls.append({
            "mint_list": mint_list,
            "wallet_address": wallet_address,
            "collection_address": collection_address,
        })
        return list(self.assets)


@pytest.fixture
def payer() -> Keypair:
    return Keypair()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()
