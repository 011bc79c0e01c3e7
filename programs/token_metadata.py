"""
programs/token_metadata.py

Metaplex Token Metadata instruction builders (CreateV1, MintV1, Verify).

Optional accounts that are not supplied are filled with the Token Metadata
program id, which the program reads as "absent".
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from . import encoding as enc
from .bubblegum import Collection, Creator
from .ids import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    SYSVAR_INSTRUCTIONS_ID,
    TOKEN_AUTH_RULES_PROGRAM_ID,
    TOKEN_METADATA_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .pda import find_master_edition_pda, find_metadata_pda, find_token_record_pda


CREATE_DISCRIMINATOR = 42
MINT_DISCRIMINATOR = 43
VERIFY_DISCRIMINATOR = 52

CREATE_ARGS_V1 = 0
MINT_ARGS_V1 = 0
VERIFICATION_ARGS_COLLECTION_V1 = 1
COLLECTION_DETAILS_V1 = 0
PRINT_SUPPLY_ZERO = 0


class TokenStandard(IntEnum):
    NON_FUNGIBLE = 0
    FUNGIBLE_ASSET = 1
    FUNGIBLE = 2
    NON_FUNGIBLE_EDITION = 3
    PROGRAMMABLE_NON_FUNGIBLE = 4
    PROGRAMMABLE_NON_FUNGIBLE_EDITION = 5


PROGRAMMABLE_STANDARDS = (
    TokenStandard.PROGRAMMABLE_NON_FUNGIBLE,
    TokenStandard.PROGRAMMABLE_NON_FUNGIBLE_EDITION,
)


def percent_to_basis_points(percent: float) -> int:
    return int(round(percent * 100))


@dataclass
class AssetData:
    """On-chain metadata written by CreateV1."""
    name: str
    uri: str
    token_standard: TokenStandard
    symbol: str = ""
    seller_fee_basis_points: int = 550
    creators: Optional[List[Creator]] = None
    primary_sale_happened: bool = False
    is_mutable: bool = True
    collection: Optional[Collection] = None
    collection_size: Optional[int] = None  # set for sized collection parents
    rule_set: Optional[Pubkey] = None

    def encode(self) -> bytes:
        return b"".join([
            enc.string(self.name),
            enc.string(self.symbol),
            enc.string(self.uri),
            enc.u16(self.seller_fee_basis_points),
            enc.option(self.creators, lambda c: enc.vec(c, Creator.encode)),
            enc.boolean(self.primary_sale_happened),
            enc.boolean(self.is_mutable),
            enc.u8(self.token_standard),
            enc.option(self.collection, Collection.encode),
            enc.option(None, enc.u8),  # uses
            enc.option(
                self.collection_size,
                lambda size: enc.u8(COLLECTION_DETAILS_V1) + enc.u64(size),
            ),
            enc.option(self.rule_set, enc.pubkey),
        ])


@dataclass
class MintAccounts:
    """Addresses shared by the create / mint / verify flow of one mint."""
    mint: Pubkey
    metadata: Pubkey = field(init=False)
    master_edition: Pubkey = field(init=False)

    def __post_init__(self):
        self.metadata, _ = find_metadata_pda(self.mint)
        self.master_edition, _ = find_master_edition_pda(self.mint)


def _optional(address: Optional[Pubkey], writable: bool = False) -> AccountMeta:
    if address is None:
        return AccountMeta(TOKEN_METADATA_PROGRAM_ID, is_signer=False, is_writable=False)
    return AccountMeta(address, is_signer=False, is_writable=writable)


def create_v1(
    mint: Pubkey,
    authority: Pubkey,
    payer: Pubkey,
    asset_data: AssetData,
    update_authority: Optional[Pubkey] = None,
    decimals: Optional[int] = 0,
    mint_is_signer: bool = True,
) -> Instruction:
    """Create metadata (and master edition for non-fungibles) for a mint."""
    accounts = MintAccounts(mint)
    non_fungible = asset_data.token_standard not in (
        TokenStandard.FUNGIBLE,
        TokenStandard.FUNGIBLE_ASSET,
    )
    data = b"".join([
        enc.u8(CREATE_DISCRIMINATOR),
        enc.u8(CREATE_ARGS_V1),
        asset_data.encode(),
        enc.option(decimals, enc.u8),
        enc.option(PRINT_SUPPLY_ZERO if non_fungible else None, enc.u8),
    ])
    metas = [
        AccountMeta(accounts.metadata, is_signer=False, is_writable=True),
        _optional(accounts.master_edition if non_fungible else None, writable=True),
        AccountMeta(mint, is_signer=mint_is_signer, is_writable=True),
        AccountMeta(authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(update_authority or authority, is_signer=True, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSVAR_INSTRUCTIONS_ID, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, metas)


def mint_v1(
    mint: Pubkey,
    token: Pubkey,
    token_owner: Pubkey,
    authority: Pubkey,
    payer: Pubkey,
    amount: int = 1,
    token_standard: TokenStandard = TokenStandard.NON_FUNGIBLE,
    authorization_rules: Optional[Pubkey] = None,
) -> Instruction:
    """
    Mint tokens of a mint whose metadata already exists.

    Programmable standards need the token record PDA of the destination
    token account.
    """
    accounts = MintAccounts(mint)
    token_record = None
    if token_standard in PROGRAMMABLE_STANDARDS:
        token_record, _ = find_token_record_pda(mint, token)

    data = (
        enc.u8(MINT_DISCRIMINATOR)
        + enc.u8(MINT_ARGS_V1)
        + enc.u64(amount)
        + enc.option(None, enc.u8)  # authorization data
    )
    metas = [
        AccountMeta(token, is_signer=False, is_writable=True),
        _optional(token_owner),
        AccountMeta(accounts.metadata, is_signer=False, is_writable=False),
        _optional(accounts.master_edition, writable=True),
        _optional(token_record, writable=True),
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(authority, is_signer=True, is_writable=False),
        _optional(None),  # delegate record
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSVAR_INSTRUCTIONS_ID, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        _optional(TOKEN_AUTH_RULES_PROGRAM_ID if authorization_rules else None),
        _optional(authorization_rules),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, metas)


def verify_collection_v1(
    metadata: Pubkey,
    collection_mint: Pubkey,
    authority: Pubkey,
) -> Instruction:
    """
    Mark `metadata` as a verified member of `collection_mint`.

    Reads the member metadata account, so it must run after CreateV1.
    """
    collection = MintAccounts(collection_mint)
    data = enc.u8(VERIFY_DISCRIMINATOR) + enc.u8(VERIFICATION_ARGS_COLLECTION_V1)
    metas = [
        AccountMeta(authority, is_signer=True, is_writable=False),
        _optional(None),  # delegate record
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(collection_mint, is_signer=False, is_writable=False),
        AccountMeta(collection.metadata, is_signer=False, is_writable=True),
        AccountMeta(collection.master_edition, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSVAR_INSTRUCTIONS_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, metas)
