"""
programs/mpl_core.py

MPL Core instruction builders: collection and asset creation without plugins.
"""
from typing import Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from . import encoding as enc
from .ids import MPL_CORE_PROGRAM_ID, SYSTEM_PROGRAM_ID


CREATE_V1_DISCRIMINATOR = 0
CREATE_COLLECTION_V1_DISCRIMINATOR = 1

# DataState::AccountState
DATA_STATE_ACCOUNT = 0


def _optional(address: Optional[Pubkey], signer: bool = False, writable: bool = False) -> AccountMeta:
    if address is None:
        return AccountMeta(MPL_CORE_PROGRAM_ID, is_signer=False, is_writable=False)
    return AccountMeta(address, is_signer=signer, is_writable=writable)


def create_collection_v1(
    collection: Pubkey,
    payer: Pubkey,
    name: str,
    uri: str,
    update_authority: Optional[Pubkey] = None,
) -> Instruction:
    data = (
        enc.u8(CREATE_COLLECTION_V1_DISCRIMINATOR)
        + enc.string(name)
        + enc.string(uri)
        + enc.option(None, enc.u8)  # plugins
    )
    metas = [
        AccountMeta(collection, is_signer=True, is_writable=True),
        _optional(update_authority),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(MPL_CORE_PROGRAM_ID, data, metas)


def create_v1(
    asset: Pubkey,
    payer: Pubkey,
    name: str,
    uri: str,
    collection: Optional[Pubkey] = None,
    authority: Optional[Pubkey] = None,
    owner: Optional[Pubkey] = None,
) -> Instruction:
    """
    Create an asset, optionally inside a collection.

    Adding to a collection requires its update authority as `authority`.
    """
    data = (
        enc.u8(CREATE_V1_DISCRIMINATOR)
        + enc.u8(DATA_STATE_ACCOUNT)
        + enc.string(name)
        + enc.string(uri)
        + enc.option(None, enc.u8)  # plugins
    )
    metas = [
        AccountMeta(asset, is_signer=True, is_writable=True),
        _optional(collection, writable=True),
        _optional(authority, signer=True),
        AccountMeta(payer, is_signer=True, is_writable=True),
        _optional(owner),
        _optional(None),  # update authority (taken from the collection)
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        _optional(None),  # log wrapper
    ]
    return Instruction(MPL_CORE_PROGRAM_ID, data, metas)
