"""
execution/transaction_sender.py

Signs, submits and confirms fixture transactions.

Flow per call:
1. fetch latest blockhash (+ last valid block height)
2. compile a legacy message, fee payer = first signer
3. send raw bytes (skip_preflight configurable per call site)
4. confirm at the requested commitment, bounded by last valid block height

HARD RULES:
- No retries here: a failed or rejected transaction is raised to the caller
- Every submitted transaction is awaited to confirmation or failure
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed, Finalized
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendOptions:
    """Per-call submission options."""
    skip_preflight: bool = False
    commitment: Commitment = Finalized

    def to_tx_opts(self) -> TxOpts:
        return TxOpts(
            skip_confirmation=True,
            skip_preflight=self.skip_preflight,
            preflight_commitment=self.commitment,
        )


# Defaults used across the fixture minter
PROVISIONING_OPTIONS = SendOptions(skip_preflight=False, commitment=Confirmed)
BULK_MINT_OPTIONS = SendOptions(skip_preflight=True, commitment=Finalized)


def dedupe_signers(signers: Sequence[Keypair]) -> List[Keypair]:
    """Drop repeated keypairs, keeping first-seen order (fee payer stays first)."""
    seen = set()
    unique: List[Keypair] = []
    for signer in signers:
        key = signer.pubkey()
        if key in seen:
            continue
        seen.add(key)
        unique.append(signer)
    return unique


class TransactionSender:
    """
    Thin submission layer over the async Solana RPC client.

    Usable as an async context manager when it owns its client.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        rpc_url: Optional[str] = None,
        commitment: Commitment = Confirmed,
    ):
        if client is None and rpc_url is None:
            raise ValueError("TransactionSender needs either a client or an rpc_url")
        self._client = client
        self._rpc_url = rpc_url
        self._commitment = commitment
        self._owns_client = client is None

    @property
    def client(self) -> Any:
        if self._client is None:
            raise RuntimeError("TransactionSender client not initialized. Use async context manager.")
        return self._client

    async def __aenter__(self):
        if self._client is None:
            self._client = AsyncClient(self._rpc_url, commitment=self._commitment)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def get_minimum_balance_for_rent_exemption(self, space: int) -> int:
        resp = await self.client.get_minimum_balance_for_rent_exemption(space)
        return resp.value

    def build_transaction(
        self,
        instructions: Sequence[Instruction],
        signers: Sequence[Keypair],
        blockhash: Any,
        fee_payer: Optional[Pubkey] = None,
    ) -> Transaction:
        """Compile and sign a legacy transaction."""
        if not instructions:
            raise ValueError("Transaction must contain at least one instruction")
        unique = dedupe_signers(signers)
        if not unique:
            raise ValueError("Transaction needs at least one signer")
        payer = fee_payer or unique[0].pubkey()
        message = Message.new_with_blockhash(list(instructions), payer, blockhash)
        return Transaction(unique, message, blockhash)

    async def send_and_confirm(
        self,
        instructions: Sequence[Instruction],
        signers: Sequence[Keypair],
        options: SendOptions = SendOptions(),
        label: str = "tx",
    ) -> Signature:
        """
        Submit one transaction and wait for its confirmation.

        Args:
            instructions: Ordered instructions, executed atomically
            signers: Required signers; the first one pays fees
            options: Preflight / commitment settings
            label: Short name for logs

        Returns:
            Transaction signature

        Raises:
            TransactionRejectedError: If the confirmed status carries an error
        """
        latest = await self.client.get_latest_blockhash(options.commitment)
        blockhash = latest.value.blockhash
        last_valid_block_height = latest.value.last_valid_block_height

        tx = self.build_transaction(instructions, signers, blockhash)
        resp = await self.client.send_raw_transaction(bytes(tx), opts=options.to_tx_opts())
        signature = resp.value
        logger.debug(f"[tx] {label} submitted: {signature}")

        status_resp = await self.client.confirm_transaction(
            signature,
            options.commitment,
            last_valid_block_height=last_valid_block_height,
        )
        statuses = status_resp.value or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            logger.error(f"[tx] {label} rejected: {signature} {status.err}")
            raise TransactionRejectedError(signature, status.err, label=label)

        logger.info(f"[tx] {label} confirmed: {signature}")
        return signature


class TransactionSendError(Exception):
    """Base exception for transaction submission errors."""
    pass


class TransactionRejectedError(TransactionSendError):
    """Raised when a transaction lands but the program returned an error."""

    def __init__(self, signature: Signature, err: Any, label: str = "tx"):
        self.signature = signature
        self.err = err
        self.label = label
        super().__init__(f"{label} rejected ({signature}): {err}")
