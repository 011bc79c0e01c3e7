"""
programs/pda.py

Program-derived address helpers.

All derivations are pure: same seeds and program id always give the same
address, no network access involved.
"""
from typing import Tuple

from solders.pubkey import Pubkey

from .ids import BUBBLEGUM_PROGRAM_ID, TOKEN_METADATA_PROGRAM_ID


METADATA_SEED = b"metadata"
EDITION_SEED = b"edition"
TOKEN_RECORD_SEED = b"token_record"
COLLECTION_CPI_SEED = b"collection_cpi"


def find_tree_authority_pda(merkle_tree: Pubkey) -> Tuple[Pubkey, int]:
    """Tree config account owned by Bubblegum for a given Merkle tree."""
    return Pubkey.find_program_address([bytes(merkle_tree)], BUBBLEGUM_PROGRAM_ID)


def find_collection_cpi_signer_pda() -> Tuple[Pubkey, int]:
    """
    Bubblegum signer used to verify collections through CPI.

    Fixed seed, independent of the tree.
    """
    return Pubkey.find_program_address([COLLECTION_CPI_SEED], BUBBLEGUM_PROGRAM_ID)


def find_metadata_pda(mint: Pubkey) -> Tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [METADATA_SEED, bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint)],
        TOKEN_METADATA_PROGRAM_ID,
    )


def find_master_edition_pda(mint: Pubkey) -> Tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [METADATA_SEED, bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint), EDITION_SEED],
        TOKEN_METADATA_PROGRAM_ID,
    )


def find_token_record_pda(mint: Pubkey, token: Pubkey) -> Tuple[Pubkey, int]:
    """Token record of a programmable NFT token account."""
    return Pubkey.find_program_address(
        [
            METADATA_SEED,
            bytes(TOKEN_METADATA_PROGRAM_ID),
            bytes(mint),
            TOKEN_RECORD_SEED,
            bytes(token),
        ],
        TOKEN_METADATA_PROGRAM_ID,
    )
