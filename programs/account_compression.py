"""
programs/account_compression.py

Concurrent Merkle tree account sizing.

Layout of an spl-account-compression tree account (header version V1):

    account type              u8
    header version            u8
    max buffer size           u32
    max depth                 u32
    authority                 Pubkey
    creation slot             u64
    padding                   [u8; 6]
    --- tree ---
    sequence number           u64
    active index              u64
    buffer size               u64
    change logs               [ChangeLog; max_buffer_size]
    rightmost proof           Path
    --- canopy ---
    nodes                     [[u8; 32]; 2^(canopy+1) - 2]

ChangeLog = root + path[max_depth] + index u32 + padding u32
Path      = proof[max_depth] + leaf + index u32 + padding u32
"""
from dataclasses import dataclass


NODE_SIZE = 32

# account type (1) + header version (1) + 54 bytes of header data
CONCURRENT_MERKLE_TREE_HEADER_SIZE_V1 = 2 + 54

# sequence number, active index, buffer size
_TREE_COUNTERS_SIZE = 8 * 3


@dataclass(frozen=True)
class TreeConfig:
    """
    Shape of a concurrent Merkle tree.

    The depth / buffer pair is submitted verbatim; invalid pairs are rejected
    by the compression program when the creation transaction executes.
    """
    max_depth: int
    max_buffer_size: int
    canopy_depth: int = 0

    def __post_init__(self):
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_buffer_size <= 0:
            raise ValueError(f"max_buffer_size must be positive, got {self.max_buffer_size}")
        if not 0 <= self.canopy_depth <= self.max_depth:
            raise ValueError(
                f"canopy_depth must be within [0, {self.max_depth}], got {self.canopy_depth}"
            )

    @property
    def capacity(self) -> int:
        """Number of leaves the tree can hold."""
        return 1 << self.max_depth

    @property
    def account_size(self) -> int:
        return get_concurrent_merkle_tree_account_size(
            self.max_depth, self.max_buffer_size, self.canopy_depth
        )


DEFAULT_TREE_CONFIG = TreeConfig(max_depth=3, max_buffer_size=8)


def _change_log_size(max_depth: int) -> int:
    return NODE_SIZE + NODE_SIZE * max_depth + 4 + 4


def _path_size(max_depth: int) -> int:
    return NODE_SIZE * max_depth + NODE_SIZE + 4 + 4


def get_concurrent_merkle_tree_size(max_depth: int, max_buffer_size: int) -> int:
    """Byte size of the tree body (without header and canopy)."""
    return (
        _TREE_COUNTERS_SIZE
        + max_buffer_size * _change_log_size(max_depth)
        + _path_size(max_depth)
    )


def get_canopy_size(canopy_depth: int) -> int:
    if canopy_depth <= 0:
        return 0
    return ((1 << (canopy_depth + 1)) - 2) * NODE_SIZE


def get_concurrent_merkle_tree_account_size(
    max_depth: int,
    max_buffer_size: int,
    canopy_depth: int = 0,
) -> int:
    """
    Exact account length for a concurrent Merkle tree.

    Args:
        max_depth: Tree depth (capacity is 2^max_depth leaves)
        max_buffer_size: Number of change logs kept for concurrent appends
        canopy_depth: Number of upper tree levels cached on chain

    Returns:
        Account size in bytes, used for the rent-exemption calculation
    """
    return (
        CONCURRENT_MERKLE_TREE_HEADER_SIZE_V1
        + get_concurrent_merkle_tree_size(max_depth, max_buffer_size)
        + get_canopy_size(canopy_depth)
    )
