"""
minting/standard.py

Uncompressed NFT issuance.

- StandardMintIssuer: Token Metadata collections, NFTs and programmable NFTs
- CoreAssetIssuer: MPL Core collections and assets

Members are created with an unverified collection and verified in the same
transaction, after the create instruction that writes their metadata.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.instructions import get_associated_token_address

from execution.transaction_sender import SendOptions, TransactionSender
from programs import mpl_core, token_metadata as tm
from programs.bubblegum import Collection, Creator
from programs.pda import find_metadata_pda

logger = logging.getLogger(__name__)


COLLECTION_NAME = "My Collection"
COLLECTION_URI = "https://example.com/my-collection.json"
ROYALTY_PERCENT = 5.5


@dataclass(frozen=True)
class MintResult:
    mint: Pubkey
    signature: Signature


class StandardMintIssuer:
    """Token Metadata issuer; the payer is mint authority and update authority."""

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        options: SendOptions = SendOptions(),
    ):
        self._sender = sender
        self._payer = payer
        self._options = options

    def _create_and_mint(
        self,
        mint: Pubkey,
        owner: Pubkey,
        asset_data: tm.AssetData,
    ) -> List[Instruction]:
        payer = self._payer.pubkey()
        token = get_associated_token_address(owner, mint)
        return [
            tm.create_v1(mint=mint, authority=payer, payer=payer, asset_data=asset_data),
            tm.mint_v1(
                mint=mint,
                token=token,
                token_owner=owner,
                authority=payer,
                payer=payer,
                amount=1,
                token_standard=asset_data.token_standard,
            ),
        ]

    def build_collection_instructions(self, mint: Pubkey, name: str, uri: str) -> List[Instruction]:
        payer = self._payer.pubkey()
        asset_data = tm.AssetData(
            name=name,
            uri=uri,
            token_standard=tm.TokenStandard.NON_FUNGIBLE,
            seller_fee_basis_points=tm.percent_to_basis_points(ROYALTY_PERCENT),
            creators=[Creator(address=payer, verified=True, share=100)],
            collection_size=0,
        )
        return self._create_and_mint(mint, payer, asset_data)

    def build_member_instructions(
        self,
        mint: Pubkey,
        collection: Pubkey,
        owner: Pubkey,
        name: str,
        uri: str,
        programmable: bool = True,
        verify: bool = True,
    ) -> List[Instruction]:
        payer = self._payer.pubkey()
        standard = (
            tm.TokenStandard.PROGRAMMABLE_NON_FUNGIBLE
            if programmable
            else tm.TokenStandard.NON_FUNGIBLE
        )
        asset_data = tm.AssetData(
            name=name,
            uri=uri,
            token_standard=standard,
            seller_fee_basis_points=tm.percent_to_basis_points(ROYALTY_PERCENT),
            creators=[Creator(address=payer, verified=True, share=100)],
            collection=Collection(key=collection, verified=False),
        )
        instructions = self._create_and_mint(mint, owner, asset_data)
        if verify:
            metadata, _ = find_metadata_pda(mint)
            instructions.append(tm.verify_collection_v1(
                metadata=metadata,
                collection_mint=collection,
                authority=payer,
            ))
        return instructions

    async def create_collection(
        self,
        name: str = COLLECTION_NAME,
        uri: str = COLLECTION_URI,
    ) -> MintResult:
        """Create a sized collection NFT owned by the payer."""
        mint = Keypair()
        signature = await self._sender.send_and_confirm(
            self.build_collection_instructions(mint.pubkey(), name, uri),
            [self._payer, mint],
            options=self._options,
            label="create_tm_collection",
        )
        logger.info(f"[tm] Created collection {mint.pubkey()}")
        return MintResult(mint=mint.pubkey(), signature=signature)

    async def mint_nft(
        self,
        collection: Pubkey,
        owner: Pubkey,
        name: str,
        uri: str,
        programmable: bool = True,
        verify: bool = True,
    ) -> MintResult:
        """
        Mint one NFT into `collection`.

        Without `verify` the token exists but is not attributable to the
        collection downstream.
        """
        mint = Keypair()
        signature = await self._sender.send_and_confirm(
            self.build_member_instructions(
                mint.pubkey(), collection, owner, name, uri,
                programmable=programmable,
                verify=verify,
            ),
            [self._payer, mint],
            options=self._options,
            label="mint_pnft" if programmable else "mint_nft",
        )
        logger.debug(f"[tm] Minted {name} ({mint.pubkey()}) to {owner}")
        return MintResult(mint=mint.pubkey(), signature=signature)


class CoreAssetIssuer:
    """MPL Core issuer; the payer is the collection update authority."""

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        options: SendOptions = SendOptions(),
    ):
        self._sender = sender
        self._payer = payer
        self._options = options

    async def create_collection(
        self,
        name: str = COLLECTION_NAME,
        uri: str = COLLECTION_URI,
    ) -> MintResult:
        collection = Keypair()
        ix = mpl_core.create_collection_v1(
            collection=collection.pubkey(),
            payer=self._payer.pubkey(),
            name=name,
            uri=uri,
        )
        signature = await self._sender.send_and_confirm(
            [ix],
            [self._payer, collection],
            options=self._options,
            label="create_core_collection",
        )
        logger.info(f"[core] Created collection {collection.pubkey()}")
        return MintResult(mint=collection.pubkey(), signature=signature)

    async def create_asset(
        self,
        collection: Optional[Pubkey],
        owner: Pubkey,
        name: str,
        uri: str,
    ) -> MintResult:
        asset = Keypair()
        ix = mpl_core.create_v1(
            asset=asset.pubkey(),
            payer=self._payer.pubkey(),
            name=name,
            uri=uri,
            collection=collection,
            authority=self._payer.pubkey() if collection is not None else None,
            owner=owner,
        )
        signature = await self._sender.send_and_confirm(
            [ix],
            [self._payer, asset],
            options=self._options,
            label="create_core_asset",
        )
        logger.debug(f"[core] Minted {name} ({asset.pubkey()}) to {owner}")
        return MintResult(mint=asset.pubkey(), signature=signature)
