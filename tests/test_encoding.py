import hashlib

from solders.pubkey import Pubkey

from programs import encoding as enc


def test_string_is_length_prefixed():
    assert enc.string("cNFT") == b"\x04\x00\x00\x00cNFT"
    assert enc.string("") == b"\x00\x00\x00\x00"


def test_option():
    assert enc.option(None, enc.u8) == b"\x00"
    assert enc.option(7, enc.u8) == b"\x01\x07"
    assert enc.option(False, enc.boolean) == b"\x01\x00"


def test_vec():
    assert enc.vec([1, 2], enc.u16) == b"\x02\x00\x00\x00\x01\x00\x02\x00"
    assert enc.vec([], enc.u8) == b"\x00\x00\x00\x00"


def test_optional_nonzero_pubkey():
    key = Pubkey.new_unique()
    assert enc.optional_nonzero_pubkey(None) == bytes(32)
    assert enc.optional_nonzero_pubkey(key) == bytes(key)


def test_integers_are_little_endian():
    assert enc.u32(1000) == b"\xe8\x03\x00\x00"
    assert enc.u64(1) == b"\x01" + bytes(7)


def test_discriminators():
    assert enc.anchor_discriminator("create_tree") == hashlib.sha256(b"global:create_tree").digest()[:8]
    assert enc.spl_discriminator("spl_token_group_interface:initialize_member") == (
        hashlib.sha256(b"spl_token_group_interface:initialize_member").digest()[:8]
    )
