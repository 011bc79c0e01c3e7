"""
minting/compressed.py

Compressed NFT issuance: one Bubblegum leaf per call, minted straight into a
verified collection.
"""
import logging
from dataclasses import dataclass

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from execution.transaction_sender import BULK_MINT_OPTIONS, SendOptions, TransactionSender
from programs import bubblegum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompressedMintResult:
    signature: Signature
    leaf_owner: Pubkey
    tree: Pubkey
    name: str


class CompressedMintIssuer:
    """
    Appends compressed NFTs to an existing tree.

    The tree and the sized collection must already exist; the payer is used as
    tree delegate and collection update authority. Every call appends a new
    leaf, nothing is deduplicated.
    """

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        options: SendOptions = BULK_MINT_OPTIONS,
    ):
        self._sender = sender
        self._payer = payer
        self._options = options

    def build_mint_instruction(
        self,
        tree: Pubkey,
        collection_mint: Pubkey,
        leaf_owner: Pubkey,
        name: str,
        symbol: str,
        uri: str,
    ) -> Instruction:
        payer = self._payer.pubkey()
        metadata = bubblegum.MetadataArgs(
            name=name,
            symbol=symbol,
            uri=uri,
            seller_fee_basis_points=500,
            primary_sale_happened=True,
            is_mutable=True,
            token_standard=bubblegum.TokenStandard.NON_FUNGIBLE,
            collection=bubblegum.Collection(key=collection_mint, verified=False),
            token_program_version=bubblegum.TokenProgramVersion.ORIGINAL,
            creators=[bubblegum.Creator(address=payer, verified=False, share=100)],
        )
        return bubblegum.mint_to_collection_v1(
            merkle_tree=tree,
            leaf_owner=leaf_owner,
            payer=payer,
            collection_mint=collection_mint,
            metadata=metadata,
        )

    async def mint_one(
        self,
        tree: Pubkey,
        collection_mint: Pubkey,
        leaf_owner: Pubkey,
        name: str,
        symbol: str,
        uri: str,
    ) -> CompressedMintResult:
        ix = self.build_mint_instruction(tree, collection_mint, leaf_owner, name, symbol, uri)
        signature = await self._sender.send_and_confirm(
            [ix],
            [self._payer],
            options=self._options,
            label="mint_cnft",
        )
        logger.debug(f"[cnft] Minted {name} to {leaf_owner} in tree {tree}")
        return CompressedMintResult(
            signature=signature,
            leaf_owner=leaf_owner,
            tree=tree,
            name=name,
        )
