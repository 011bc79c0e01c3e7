"""
programs/encoding.py

Little-endian binary helpers for instruction data.

Metaplex programs use borsh, SPL interfaces use a borsh-compatible layout
prefixed with an 8-byte discriminator. Everything here is built on struct.
"""
import hashlib
import struct
from typing import Callable, Iterable, Optional, TypeVar

from solders.pubkey import Pubkey


T = TypeVar("T")

U8 = struct.Struct("<B")
U16 = struct.Struct("<H")
U32 = struct.Struct("<I")
U64 = struct.Struct("<Q")

PUBKEY_LENGTH = 32


def u8(value: int) -> bytes:
    return U8.pack(value)


def u16(value: int) -> bytes:
    return U16.pack(value)


def u32(value: int) -> bytes:
    return U32.pack(value)


def u64(value: int) -> bytes:
    return U64.pack(value)


def boolean(value: bool) -> bytes:
    return U8.pack(1 if value else 0)


def pubkey(value: Pubkey) -> bytes:
    return bytes(value)


def string(value: str) -> bytes:
    """Borsh string: u32 byte length followed by UTF-8 bytes."""
    raw = value.encode("utf-8")
    return U32.pack(len(raw)) + raw


def option(value: Optional[T], encode: Callable[[T], bytes]) -> bytes:
    """Borsh Option: 0 for None, 1 followed by the encoded value."""
    if value is None:
        return b"\x00"
    return b"\x01" + encode(value)


def vec(values: Iterable[T], encode: Callable[[T], bytes]) -> bytes:
    items = [encode(v) for v in values]
    return U32.pack(len(items)) + b"".join(items)


def optional_nonzero_pubkey(value: Optional[Pubkey]) -> bytes:
    """SPL OptionalNonZeroPubkey: 32 zero bytes stand for None."""
    if value is None:
        return bytes(PUBKEY_LENGTH)
    return bytes(value)


def anchor_discriminator(instruction_name: str) -> bytes:
    """First 8 bytes of sha256("global:<name>"), as Anchor programs expect."""
    return hashlib.sha256(f"global:{instruction_name}".encode("utf-8")).digest()[:8]


def spl_discriminator(namespace: str) -> bytes:
    """First 8 bytes of sha256("<interface>:<instruction>") for SPL interfaces."""
    return hashlib.sha256(namespace.encode("utf-8")).digest()[:8]
