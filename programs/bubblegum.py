"""
programs/bubblegum.py

Bubblegum (compressed NFT) instruction builders.

Only the two instructions the fixture minter needs: tree config creation and
minting a leaf straight into a verified collection.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from . import encoding as enc
from .ids import (
    ACCOUNT_COMPRESSION_PROGRAM_ID,
    BUBBLEGUM_PROGRAM_ID,
    NOOP_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_METADATA_PROGRAM_ID,
)
from .pda import (
    find_collection_cpi_signer_pda,
    find_master_edition_pda,
    find_metadata_pda,
    find_tree_authority_pda,
)


CREATE_TREE_DISCRIMINATOR = enc.anchor_discriminator("create_tree")
MINT_TO_COLLECTION_V1_DISCRIMINATOR = enc.anchor_discriminator("mint_to_collection_v1")


class TokenStandard(IntEnum):
    NON_FUNGIBLE = 0
    FUNGIBLE_ASSET = 1
    FUNGIBLE = 2
    NON_FUNGIBLE_EDITION = 3


class TokenProgramVersion(IntEnum):
    ORIGINAL = 0
    TOKEN_2022 = 1


@dataclass(frozen=True)
class Creator:
    address: Pubkey
    verified: bool
    share: int

    def encode(self) -> bytes:
        return enc.pubkey(self.address) + enc.boolean(self.verified) + enc.u8(self.share)


@dataclass(frozen=True)
class Collection:
    key: Pubkey
    verified: bool = False

    def encode(self) -> bytes:
        # Bubblegum and Token Metadata both serialize `verified` first
        return enc.boolean(self.verified) + enc.pubkey(self.key)


@dataclass
class MetadataArgs:
    """Leaf metadata of a compressed NFT."""
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int = 500
    primary_sale_happened: bool = True
    is_mutable: bool = True
    edition_nonce: Optional[int] = None
    token_standard: Optional[TokenStandard] = TokenStandard.NON_FUNGIBLE
    collection: Optional[Collection] = None
    token_program_version: TokenProgramVersion = TokenProgramVersion.ORIGINAL
    creators: List[Creator] = field(default_factory=list)

    def encode(self) -> bytes:
        return b"".join([
            enc.string(self.name),
            enc.string(self.symbol),
            enc.string(self.uri),
            enc.u16(self.seller_fee_basis_points),
            enc.boolean(self.primary_sale_happened),
            enc.boolean(self.is_mutable),
            enc.option(self.edition_nonce, enc.u8),
            enc.option(self.token_standard, enc.u8),
            enc.option(self.collection, Collection.encode),
            enc.option(None, enc.u8),  # uses
            enc.u8(self.token_program_version),
            enc.vec(self.creators, Creator.encode),
        ])


def create_tree(
    merkle_tree: Pubkey,
    payer: Pubkey,
    tree_creator: Pubkey,
    max_depth: int,
    max_buffer_size: int,
    public: Optional[bool] = False,
) -> Instruction:
    """Initialize the tree config of a freshly allocated Merkle tree account."""
    tree_authority, _ = find_tree_authority_pda(merkle_tree)
    data = (
        CREATE_TREE_DISCRIMINATOR
        + enc.u32(max_depth)
        + enc.u32(max_buffer_size)
        + enc.option(public, enc.boolean)
    )
    accounts = [
        AccountMeta(tree_authority, is_signer=False, is_writable=True),
        AccountMeta(merkle_tree, is_signer=False, is_writable=True),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(tree_creator, is_signer=True, is_writable=False),
        AccountMeta(NOOP_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(ACCOUNT_COMPRESSION_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(BUBBLEGUM_PROGRAM_ID, data, accounts)


def mint_to_collection_v1(
    merkle_tree: Pubkey,
    leaf_owner: Pubkey,
    payer: Pubkey,
    collection_mint: Pubkey,
    metadata: MetadataArgs,
    leaf_delegate: Optional[Pubkey] = None,
    tree_delegate: Optional[Pubkey] = None,
    collection_authority: Optional[Pubkey] = None,
) -> Instruction:
    """
    Append one leaf to the tree and verify it against a sized collection.

    No collection authority record is used: the record slot carries the
    Bubblegum program id, the collection authority signs directly.
    """
    tree_authority, _ = find_tree_authority_pda(merkle_tree)
    collection_metadata, _ = find_metadata_pda(collection_mint)
    collection_edition, _ = find_master_edition_pda(collection_mint)
    bubblegum_signer, _ = find_collection_cpi_signer_pda()

    accounts = [
        AccountMeta(tree_authority, is_signer=False, is_writable=True),
        AccountMeta(leaf_owner, is_signer=False, is_writable=False),
        AccountMeta(leaf_delegate or leaf_owner, is_signer=False, is_writable=False),
        AccountMeta(merkle_tree, is_signer=False, is_writable=True),
        AccountMeta(payer, is_signer=True, is_writable=False),
        AccountMeta(tree_delegate or payer, is_signer=True, is_writable=False),
        AccountMeta(collection_authority or payer, is_signer=True, is_writable=False),
        AccountMeta(BUBBLEGUM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(collection_mint, is_signer=False, is_writable=False),
        AccountMeta(collection_metadata, is_signer=False, is_writable=True),
        AccountMeta(collection_edition, is_signer=False, is_writable=False),
        AccountMeta(bubblegum_signer, is_signer=False, is_writable=False),
        AccountMeta(NOOP_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(ACCOUNT_COMPRESSION_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_METADATA_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    data = MINT_TO_COLLECTION_V1_DISCRIMINATOR + metadata.encode()
    return Instruction(BUBBLEGUM_PROGRAM_ID, data, accounts)
