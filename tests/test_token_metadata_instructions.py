from solders.pubkey import Pubkey

from programs import mpl_core
from programs import token_metadata as tm
from programs.bubblegum import Collection
from programs.ids import MPL_CORE_PROGRAM_ID, TOKEN_METADATA_PROGRAM_ID
from programs.pda import find_master_edition_pda, find_metadata_pda, find_token_record_pda


def test_percent_to_basis_points():
    assert tm.percent_to_basis_points(5.5) == 550
    assert tm.percent_to_basis_points(0) == 0


def test_create_v1_sized_collection():
    mint = Pubkey.new_unique()
    payer = Pubkey.new_unique()
    data = tm.AssetData(
        name="My Collection",
        uri="u",
        token_standard=tm.TokenStandard.NON_FUNGIBLE,
        collection_size=0,
    )
    ix = tm.create_v1(mint=mint, authority=payer, payer=payer, asset_data=data)

    assert ix.program_id == TOKEN_METADATA_PROGRAM_ID
    assert bytes(ix.data)[:2] == bytes([42, 0])
    assert ix.accounts[0].pubkey == find_metadata_pda(mint)[0]
    assert ix.accounts[1].pubkey == find_master_edition_pda(mint)[0]
    assert ix.accounts[2].pubkey == mint and ix.accounts[2].is_signer
    # collection details V1 { size: 0 }, no rule set, decimals 0, print supply Zero
    assert bytes(ix.data).endswith(b"\x01\x00" + bytes(8) + b"\x00" + b"\x01\x00" + b"\x01\x00")


def test_asset_data_collection_is_unverified():
    key = Pubkey.new_unique()
    encoded = tm.AssetData(
        name="n", uri="u",
        token_standard=tm.TokenStandard.PROGRAMMABLE_NON_FUNGIBLE,
        collection=Collection(key=key, verified=False),
    ).encode()
    assert b"\x01\x00" + bytes(key) in encoded


def test_mint_v1_programmable_uses_token_record():
    mint = Pubkey.new_unique()
    token = Pubkey.new_unique()
    payer = Pubkey.new_unique()
    ix = tm.mint_v1(
        mint=mint, token=token, token_owner=payer, authority=payer, payer=payer,
        token_standard=tm.TokenStandard.PROGRAMMABLE_NON_FUNGIBLE,
    )
    assert bytes(ix.data)[:2] == bytes([43, 0])
    assert ix.accounts[4].pubkey == find_token_record_pda(mint, token)[0]

    plain = tm.mint_v1(mint=mint, token=token, token_owner=payer, authority=payer, payer=payer)
    assert plain.accounts[4].pubkey == TOKEN_METADATA_PROGRAM_ID


def test_verify_collection_v1():
    member_metadata = Pubkey.new_unique()
    collection = Pubkey.new_unique()
    authority = Pubkey.new_unique()
    ix = tm.verify_collection_v1(member_metadata, collection, authority)
    assert bytes(ix.data) == bytes([52, 1])
    keys = [a.pubkey for a in ix.accounts]
    assert keys[0] == authority and ix.accounts[0].is_signer
    assert keys[2] == member_metadata
    assert keys[4] == find_metadata_pda(collection)[0]
    assert keys[5] == find_master_edition_pda(collection)[0]


def test_mpl_core_create_v1_in_collection():
    asset = Pubkey.new_unique()
    collection = Pubkey.new_unique()
    payer = Pubkey.new_unique()
    owner = Pubkey.new_unique()
    ix = mpl_core.create_v1(asset, payer, "Test Nft Mpl Core 0", "u", collection=collection, authority=payer, owner=owner)
    assert ix.program_id == MPL_CORE_PROGRAM_ID
    assert bytes(ix.data)[:2] == b"\x00\x00"
    keys = [a.pubkey for a in ix.accounts]
    assert keys[:5] == [asset, collection, payer, payer, owner]
    assert len(keys) == 8


def test_mpl_core_create_collection_v1():
    collection = Pubkey.new_unique()
    payer = Pubkey.new_unique()
    ix = mpl_core.create_collection_v1(collection, payer, "My Collection", "u")
    assert bytes(ix.data)[0] == 1
    assert ix.accounts[0].is_signer
    assert ix.accounts[1].pubkey == MPL_CORE_PROGRAM_ID
