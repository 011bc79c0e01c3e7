"""
programs/token_extensions.py

Token-2022 extension instructions not covered by spl.token.instructions:
pointer extensions, close / delegate authorities, the token-group interface
and the token-metadata interface.

Mint sizing mirrors the extension TLV layout: a mint with extensions is padded
to the base account length, then carries an account type byte and one
type(u16) + length(u16) + value entry per extension.
"""
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from . import encoding as enc
from .ids import TOKEN_2022_PROGRAM_ID


MINT_SIZE = 82
ACCOUNT_SIZE = 165
MULTISIG_SIZE = 355
ACCOUNT_TYPE_SIZE = 1
TYPE_SIZE = 2
LENGTH_SIZE = 2

# Token-2022 instruction indices
SET_AUTHORITY = 6
INITIALIZE_MINT_CLOSE_AUTHORITY = 25
INITIALIZE_PERMANENT_DELEGATE = 35
METADATA_POINTER_EXTENSION = 39
GROUP_POINTER_EXTENSION = 40
GROUP_MEMBER_POINTER_EXTENSION = 41
POINTER_INITIALIZE = 0

INITIALIZE_GROUP_DISCRIMINATOR = enc.spl_discriminator(
    "spl_token_group_interface:initialize_token_group"
)
INITIALIZE_MEMBER_DISCRIMINATOR = enc.spl_discriminator(
    "spl_token_group_interface:initialize_member"
)
INITIALIZE_METADATA_DISCRIMINATOR = enc.spl_discriminator(
    "spl_token_metadata_interface:initialize_account"
)


class ExtensionType(IntEnum):
    MINT_CLOSE_AUTHORITY = 3
    PERMANENT_DELEGATE = 12
    METADATA_POINTER = 18
    TOKEN_METADATA = 19
    GROUP_POINTER = 20
    TOKEN_GROUP = 21
    GROUP_MEMBER_POINTER = 22
    TOKEN_GROUP_MEMBER = 23


# Fixed value lengths; TOKEN_METADATA is variable and reallocated on write
EXTENSION_LENGTHS = {
    ExtensionType.MINT_CLOSE_AUTHORITY: 32,
    ExtensionType.PERMANENT_DELEGATE: 32,
    ExtensionType.METADATA_POINTER: 64,
    ExtensionType.TOKEN_METADATA: 0,
    ExtensionType.GROUP_POINTER: 64,
    ExtensionType.TOKEN_GROUP: 80,
    ExtensionType.GROUP_MEMBER_POINTER: 64,
    ExtensionType.TOKEN_GROUP_MEMBER: 72,
}


class ExtensionAuthorityType(IntEnum):
    """AuthorityType values of Token-2022 SetAuthority."""
    MINT_TOKENS = 0
    FREEZE_ACCOUNT = 1
    ACCOUNT_OWNER = 2
    CLOSE_ACCOUNT = 3
    TRANSFER_FEE_CONFIG = 4
    WITHHELD_WITHDRAW = 5
    CLOSE_MINT = 6
    INTEREST_RATE = 7
    PERMANENT_DELEGATE = 8
    CONFIDENTIAL_TRANSFER_MINT = 9
    TRANSFER_HOOK_PROGRAM_ID = 10
    CONFIDENTIAL_TRANSFER_FEE_CONFIG = 11
    METADATA_POINTER = 12
    GROUP_POINTER = 13
    GROUP_MEMBER_POINTER = 14


def get_mint_len(extensions: Iterable[ExtensionType]) -> int:
    """Account length of a Token-2022 mint carrying `extensions`."""
    extensions = list(extensions)
    if not extensions:
        return MINT_SIZE
    size = ACCOUNT_SIZE + ACCOUNT_TYPE_SIZE + sum(
        TYPE_SIZE + LENGTH_SIZE + EXTENSION_LENGTHS[ext] for ext in extensions
    )
    # a mint may never be mistaken for a multisig account
    if size == MULTISIG_SIZE:
        size += TYPE_SIZE
    return size


def pack_token_metadata(
    mint: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    update_authority: Optional[Pubkey] = None,
    additional_metadata: Sequence[Tuple[str, str]] = (),
) -> bytes:
    """Serialized TokenMetadata extension value."""
    return b"".join([
        enc.optional_nonzero_pubkey(update_authority),
        enc.pubkey(mint),
        enc.string(name),
        enc.string(symbol),
        enc.string(uri),
        enc.vec(additional_metadata, lambda kv: enc.string(kv[0]) + enc.string(kv[1])),
    ])


def _pointer_initialize(
    extension_instruction: int,
    mint: Pubkey,
    authority: Optional[Pubkey],
    address: Optional[Pubkey],
    program_id: Pubkey,
) -> Instruction:
    data = (
        enc.u8(extension_instruction)
        + enc.u8(POINTER_INITIALIZE)
        + enc.optional_nonzero_pubkey(authority)
        + enc.optional_nonzero_pubkey(address)
    )
    return Instruction(program_id, data, [AccountMeta(mint, is_signer=False, is_writable=True)])


def initialize_metadata_pointer(
    mint: Pubkey,
    authority: Optional[Pubkey],
    metadata_address: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    return _pointer_initialize(METADATA_POINTER_EXTENSION, mint, authority, metadata_address, program_id)


def initialize_group_pointer(
    mint: Pubkey,
    authority: Optional[Pubkey],
    group_address: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    return _pointer_initialize(GROUP_POINTER_EXTENSION, mint, authority, group_address, program_id)


def initialize_group_member_pointer(
    mint: Pubkey,
    authority: Optional[Pubkey],
    member_address: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    return _pointer_initialize(GROUP_MEMBER_POINTER_EXTENSION, mint, authority, member_address, program_id)


def initialize_mint_close_authority(
    mint: Pubkey,
    close_authority: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    data = (
        enc.u8(INITIALIZE_MINT_CLOSE_AUTHORITY)
        + enc.boolean(close_authority is not None)
        + enc.optional_nonzero_pubkey(close_authority)
    )
    return Instruction(program_id, data, [AccountMeta(mint, is_signer=False, is_writable=True)])


def initialize_permanent_delegate(
    mint: Pubkey,
    delegate: Pubkey,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    data = enc.u8(INITIALIZE_PERMANENT_DELEGATE) + enc.pubkey(delegate)
    return Instruction(program_id, data, [AccountMeta(mint, is_signer=False, is_writable=True)])


def set_authority(
    account: Pubkey,
    current_authority: Pubkey,
    authority_type: ExtensionAuthorityType,
    new_authority: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    """SetAuthority for the extension authority types (None revokes)."""
    data = (
        enc.u8(SET_AUTHORITY)
        + enc.u8(authority_type)
        + enc.boolean(new_authority is not None)
        + enc.optional_nonzero_pubkey(new_authority)
    )
    accounts = [
        AccountMeta(account, is_signer=False, is_writable=True),
        AccountMeta(current_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id, data, accounts)


def initialize_group(
    group: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    update_authority: Optional[Pubkey],
    max_size: int,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    data = (
        INITIALIZE_GROUP_DISCRIMINATOR
        + enc.optional_nonzero_pubkey(update_authority)
        + enc.u64(max_size)
    )
    accounts = [
        AccountMeta(group, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id, data, accounts)


def initialize_member(
    member: Pubkey,
    member_mint: Pubkey,
    member_mint_authority: Pubkey,
    group: Pubkey,
    group_update_authority: Pubkey,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    accounts = [
        AccountMeta(member, is_signer=False, is_writable=True),
        AccountMeta(member_mint, is_signer=False, is_writable=False),
        AccountMeta(member_mint_authority, is_signer=True, is_writable=False),
        AccountMeta(group, is_signer=False, is_writable=True),
        AccountMeta(group_update_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id, INITIALIZE_MEMBER_DISCRIMINATOR, accounts)


def initialize_token_metadata(
    metadata: Pubkey,
    update_authority: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    data = (
        INITIALIZE_METADATA_DISCRIMINATOR
        + enc.string(name)
        + enc.string(symbol)
        + enc.string(uri)
    )
    accounts: List[AccountMeta] = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(update_authority, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id, data, accounts)
