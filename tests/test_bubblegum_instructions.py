from solders.pubkey import Pubkey

from programs import bubblegum
from programs import encoding as enc
from programs.ids import (
    ACCOUNT_COMPRESSION_PROGRAM_ID,
    BUBBLEGUM_PROGRAM_ID,
    NOOP_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_METADATA_PROGRAM_ID,
)
from programs.pda import (
    find_collection_cpi_signer_pda,
    find_master_edition_pda,
    find_metadata_pda,
    find_tree_authority_pda,
)


def test_create_tree_instruction():
    tree = Pubkey.new_unique()
    payer = Pubkey.new_unique()
    ix = bubblegum.create_tree(tree, payer, payer, max_depth=3, max_buffer_size=8, public=False)

    assert ix.program_id == BUBBLEGUM_PROGRAM_ID
    assert bytes(ix.data) == bubblegum.CREATE_TREE_DISCRIMINATOR + enc.u32(3) + enc.u32(8) + b"\x01\x00"
    keys = [a.pubkey for a in ix.accounts]
    assert keys[0] == find_tree_authority_pda(tree)[0]
    assert keys[1] == tree
    assert keys[4:] == [NOOP_PROGRAM_ID, ACCOUNT_COMPRESSION_PROGRAM_ID, SYSTEM_PROGRAM_ID]
    assert ix.accounts[2].is_signer and ix.accounts[3].is_signer


def test_metadata_args_encoding():
    creator = Pubkey.new_unique()
    collection = Pubkey.new_unique()
    args = bubblegum.MetadataArgs(
        name="cNFT #0",
        symbol="cNFT",
        uri="u",
        collection=bubblegum.Collection(key=collection),
        creators=[bubblegum.Creator(address=creator, verified=False, share=100)],
    )
    data = args.encode()
    expected = b"".join([
        enc.string("cNFT #0"),
        enc.string("cNFT"),
        enc.string("u"),
        enc.u16(500),
        b"\x01",  # primary sale happened
        b"\x01",  # mutable
        b"\x00",  # edition nonce
        b"\x01\x00",  # NonFungible
        b"\x01\x00" + bytes(collection),
        b"\x00",  # uses
        b"\x00",  # Original
        enc.u32(1) + bytes(creator) + b"\x00" + bytes([100]),
    ])
    assert data == expected


def test_mint_to_collection_accounts():
    tree = Pubkey.new_unique()
    owner = Pubkey.new_unique()
    payer = Pubkey.new_unique()
    collection_mint = Pubkey.new_unique()
    ix = bubblegum.mint_to_collection_v1(
        merkle_tree=tree,
        leaf_owner=owner,
        payer=payer,
        collection_mint=collection_mint,
        metadata=bubblegum.MetadataArgs(name="a", symbol="b", uri="c"),
    )

    keys = [a.pubkey for a in ix.accounts]
    assert len(keys) == 16
    assert keys == [
        find_tree_authority_pda(tree)[0],
        owner,
        owner,
        tree,
        payer,
        payer,
        payer,
        BUBBLEGUM_PROGRAM_ID,
        collection_mint,
        find_metadata_pda(collection_mint)[0],
        find_master_edition_pda(collection_mint)[0],
        find_collection_cpi_signer_pda()[0],
        NOOP_PROGRAM_ID,
        ACCOUNT_COMPRESSION_PROGRAM_ID,
        TOKEN_METADATA_PROGRAM_ID,
        SYSTEM_PROGRAM_ID,
    ]
    assert bytes(ix.data).startswith(bubblegum.MINT_TO_COLLECTION_V1_DISCRIMINATOR)
