from solders.pubkey import Pubkey

from programs import encoding as enc
from programs import token_extensions as ext
from programs.ids import TOKEN_2022_PROGRAM_ID
from programs.token_extensions import ExtensionAuthorityType, ExtensionType


def test_mint_len_without_extensions():
    assert ext.get_mint_len([]) == 82


def test_mint_len_group_and_member():
    assert ext.get_mint_len([ExtensionType.GROUP_POINTER, ExtensionType.METADATA_POINTER]) == 302
    assert ext.get_mint_len([ExtensionType.METADATA_POINTER, ExtensionType.GROUP_MEMBER_POINTER]) == 302
    assert ext.get_mint_len([ExtensionType.METADATA_POINTER]) == 234


def test_mint_len_fungible_extensions():
    assert ext.get_mint_len([
        ExtensionType.MINT_CLOSE_AUTHORITY,
        ExtensionType.PERMANENT_DELEGATE,
        ExtensionType.METADATA_POINTER,
    ]) == 166 + 36 + 36 + 68


def test_pack_token_metadata_length():
    mint = Pubkey.new_unique()
    packed = ext.pack_token_metadata(mint, "Extensions #0", "Extensions", "https://x")
    assert len(packed) == 32 + 32 + 4 * 3 + len("Extensions #0") + len("Extensions") + len("https://x") + 4
    assert packed[:32] == bytes(32)
    assert packed[32:64] == bytes(mint)


def test_pointer_instruction_layout():
    mint = Pubkey.new_unique()
    authority = Pubkey.new_unique()
    ix = ext.initialize_group_pointer(mint, authority, mint)
    assert ix.program_id == TOKEN_2022_PROGRAM_ID
    assert bytes(ix.data) == bytes([40, 0]) + bytes(authority) + bytes(mint)
    assert [a.pubkey for a in ix.accounts] == [mint]

    assert bytes(ext.initialize_metadata_pointer(mint, authority, mint).data)[:2] == bytes([39, 0])
    assert bytes(ext.initialize_group_member_pointer(mint, authority, mint).data)[:2] == bytes([41, 0])


def test_set_authority_revoke():
    mint = Pubkey.new_unique()
    authority = Pubkey.new_unique()
    ix = ext.set_authority(mint, authority, ExtensionAuthorityType.GROUP_MEMBER_POINTER, None)
    assert bytes(ix.data) == bytes([6, 14, 0]) + bytes(32)
    assert ix.accounts[1].pubkey == authority and ix.accounts[1].is_signer


def test_initialize_group():
    group = Pubkey.new_unique()
    authority = Pubkey.new_unique()
    ix = ext.initialize_group(group, group, authority, authority, max_size=1000)
    assert bytes(ix.data) == ext.INITIALIZE_GROUP_DISCRIMINATOR + bytes(authority) + enc.u64(1000)
    assert ix.accounts[2].is_signer


def test_initialize_member_requires_group_authority_signature():
    member = Pubkey.new_unique()
    group = Pubkey.new_unique()
    authority = Pubkey.new_unique()
    group_authority = Pubkey.new_unique()
    ix = ext.initialize_member(member, member, authority, group, group_authority)
    assert bytes(ix.data) == ext.INITIALIZE_MEMBER_DISCRIMINATOR
    assert [a.pubkey for a in ix.accounts] == [member, member, authority, group, group_authority]
    assert ix.accounts[4].is_signer
    assert ix.accounts[3].is_writable


def test_initialize_token_metadata():
    mint = Pubkey.new_unique()
    authority = Pubkey.new_unique()
    ix = ext.initialize_token_metadata(mint, authority, mint, authority, "n", "s", "u")
    assert bytes(ix.data) == (
        ext.INITIALIZE_METADATA_DISCRIMINATOR + enc.string("n") + enc.string("s") + enc.string("u")
    )
