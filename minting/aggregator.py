"""
minting/aggregator.py

Fans fixture minting out across the four asset standards.

Flow of mint_assets():
1. core, pnfts and token22 branches run concurrently
2. each branch failure is logged and becomes None for that branch only
3. the cnfts branch runs afterwards, into the pnfts collection (or the
   explicit `collection`); without either it is skipped

Within a branch items are minted strictly one after another: each
transaction is confirmed before the next one is submitted.
"""
import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from execution.transaction_sender import SendOptions, TransactionSender
from ingestion.assets import Asset, HeliusDasClient
from programs.account_compression import DEFAULT_TREE_CONFIG, TreeConfig

from .compressed import CompressedMintIssuer
from .merkle_tree import MerkleTreeProvisioner
from .models import AssetCounts, AssetResponse, AssetStandard, CollectionWithItems
from .standard import COLLECTION_NAME, COLLECTION_URI, CoreAssetIssuer, StandardMintIssuer
from .token22 import ExtensionGroupIssuer, ExtensionMemberIssuer, GroupRef, TokenMetadataParams

logger = logging.getLogger(__name__)

T = TypeVar("T")

ITEM_URI = "https://arweave.net/WhyRt90kgI7f0EG9GPfB8TIBTIBgX3X12QaF9ObFerE"
GROUP_NAME = "Extensions Group"
GROUP_SYMBOL = "Extensions"
CNFT_SYMBOL = "cNFT"


async def _resist_error(standard: str, coro: Awaitable[T]) -> Optional[T]:
    try:
        return await coro
    except Exception as e:
        logger.error(f"[aggregator] {standard} branch failed: {e}", exc_info=True)
        return None


class AssetAggregator:
    """
    Builds mixed-standard fixture collections for a beneficiary.

    The payer signs and funds everything and is the authority of every
    collection, tree and group it creates.
    """

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        das_client: HeliusDasClient,
        options: SendOptions = SendOptions(),
        tree_config: TreeConfig = DEFAULT_TREE_CONFIG,
    ):
        self._sender = sender
        self._payer = payer
        self._das_client = das_client
        self._options = options
        self._tree_config = tree_config

        self._core = CoreAssetIssuer(sender, payer, options=options)
        self._standard = StandardMintIssuer(sender, payer, options=options)
        self._compressed = CompressedMintIssuer(sender, payer)
        self._trees = MerkleTreeProvisioner(sender, payer)
        self._groups = ExtensionGroupIssuer(sender, payer, options=options)

    async def mint_core_collection(
        self,
        count: Optional[int],
        beneficiary: Pubkey,
        group: Optional[Pubkey] = None,
    ) -> Optional[CollectionWithItems[Pubkey]]:
        if not count:
            return None
        result = CollectionWithItems(asset=AssetStandard.MPL_CORE, group=group)
        if result.group is None:
            result.group = (await self._core.create_collection(COLLECTION_NAME, COLLECTION_URI)).mint

        for i in range(count):
            minted = await self._core.create_asset(
                result.group, beneficiary, f"Test Nft Mpl Core {i}", ITEM_URI,
            )
            result.add_mint(minted.mint)
        return result

    async def mint_tm_collection(
        self,
        count: Optional[int],
        beneficiary: Pubkey,
        group: Optional[Pubkey] = None,
    ) -> Optional[CollectionWithItems[Pubkey]]:
        if not count:
            return None
        result = CollectionWithItems(asset=AssetStandard.MPL_TM, group=group)
        if result.group is None:
            result.group = (await self._standard.create_collection(COLLECTION_NAME, COLLECTION_URI)).mint

        for i in range(count):
            minted = await self._standard.mint_nft(
                result.group, beneficiary, f"Test Nft Mpl TM {i}", ITEM_URI,
                programmable=True,
            )
            result.add_mint(minted.mint)
        return result

    async def mint_compressed_collection(
        self,
        count: Optional[int],
        collection_mint: Pubkey,
        beneficiary: Pubkey,
        tree: Optional[Pubkey] = None,
    ) -> Optional[CollectionWithItems[Asset]]:
        """
        Append `count` cNFTs of `collection_mint` to `tree` (a new tree if None).

        Items are the beneficiary's compressed assets of that collection in
        that tree, as reported by the indexer after minting.
        """
        if not count:
            return None
        result: CollectionWithItems[Asset] = CollectionWithItems(asset=AssetStandard.MPL_BG, group=tree)
        if result.group is None:
            result.group = (await self._trees.create_tree(self._tree_config)).address

        for i in range(count):
            await self._compressed.mint_one(
                tree=result.group,
                collection_mint=collection_mint,
                leaf_owner=beneficiary,
                name=f"cNFT #{i}",
                symbol=CNFT_SYMBOL,
                uri=ITEM_URI,
            )

        assets = await self._das_client.fetch_helius_assets(
            wallet_address=beneficiary,
            collection_address=collection_mint,
        )
        result.extend([
            a for a in assets
            if a.compression is not None and a.compression.tree == result.group
        ])
        if len(result) < count:
            logger.warning(
                f"[aggregator] Indexer reports {len(result)} of {count} cNFTs in tree {result.group}"
            )
        return result

    async def mint_token22_collection(
        self,
        count: Optional[int],
        beneficiary: Pubkey,
        group: Optional[GroupRef] = None,
    ) -> Optional[CollectionWithItems[Pubkey]]:
        if not count:
            return None
        if group is None:
            created = await self._groups.create_group(
                TokenMetadataParams(name=GROUP_NAME, symbol=GROUP_SYMBOL, uri=COLLECTION_URI),
                self._payer.pubkey(),
            )
            group = self._groups.group_ref(created)

        members = ExtensionMemberIssuer(self._sender, self._payer, group=group, options=self._options)
        result = CollectionWithItems(asset=AssetStandard.TOKEN_2022, group=group.group_address)
        for i in range(count):
            minted = await members.mint_member(
                TokenMetadataParams(name=f"Extensions #{i}", symbol=GROUP_SYMBOL, uri=ITEM_URI),
                beneficiary,
            )
            result.add_mint(minted.mint.pubkey())
        return result

    async def mint_assets(
        self,
        counts: AssetCounts,
        beneficiary: Pubkey,
        collection: Optional[Pubkey] = None,
        core_collection: Optional[Pubkey] = None,
        tree: Optional[Pubkey] = None,
    ) -> AssetResponse:
        """
        Mint every requested standard for `beneficiary`.

        Args:
            counts: Items per standard; 0 / None skips a standard
            beneficiary: Owner of the minted items
            collection: Existing Token Metadata collection for pnfts and cnfts
            core_collection: Existing MPL Core collection
            tree: Existing Merkle tree for cnfts

        Returns:
            AssetResponse with None for skipped or failed standards
        """
        response = AssetResponse()
        response.core, response.pnfts, response.token22 = await asyncio.gather(
            _resist_error("core", self.mint_core_collection(counts.core, beneficiary, core_collection)),
            _resist_error("pnfts", self.mint_tm_collection(counts.pnfts, beneficiary, collection)),
            _resist_error("token22", self.mint_token22_collection(counts.token22, beneficiary)),
        )

        collection_mint = response.pnfts.group if response.pnfts is not None else collection
        if collection_mint is not None:
            response.cnfts = await _resist_error(
                "cnfts",
                self.mint_compressed_collection(counts.cnfts, collection_mint, beneficiary, tree),
            )
        elif counts.cnfts:
            logger.warning("[aggregator] No collection available, skipping cnfts")

        logger.info(
            f"[aggregator] Minted {', '.join(f'{k}={len(v)}' for k, v in response.as_dict().items()) or 'nothing'}"
        )
        return response
