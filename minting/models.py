"""
minting/models.py

Request / response envelopes of a fixture minting run.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from solders.pubkey import Pubkey


M = TypeVar("M")


class AssetStandard(str, Enum):
    MPL_CORE = "MPL_CORE"
    MPL_TM = "MPL_TM"
    MPL_BG = "MPL_BG"
    TOKEN_2022 = "TOKEN_2022"


@dataclass
class CollectionWithItems(Generic[M]):
    """
    A collection-like parent and the items minted into it.

    `group` is a collection mint, a Core collection, a Merkle tree or a
    Token-2022 group mint depending on `asset`. It must be set before any
    item is added.
    """
    asset: AssetStandard
    group: Optional[Pubkey] = None
    mints: List[M] = field(default_factory=list)

    def add_mint(self, mint: M) -> None:
        if self.group is None:
            raise ValueError(f"{self.asset.value} collection has no group; create it before minting items")
        self.mints.append(mint)

    def extend(self, mints: List[M]) -> None:
        for mint in mints:
            self.add_mint(mint)

    def __len__(self) -> int:
        return len(self.mints)


@dataclass(frozen=True)
class AssetCounts:
    """Requested number of items per standard; 0 / None skips the standard."""
    core: Optional[int] = None
    pnfts: Optional[int] = None
    cnfts: Optional[int] = None
    token22: Optional[int] = None

    def __post_init__(self):
        for name in ("core", "pnfts", "cnfts", "token22"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} count cannot be negative, got {value}")


@dataclass
class AssetResponse:
    """Collections produced by a run; a standard is None when skipped or failed."""
    core: Optional[CollectionWithItems[Pubkey]] = None
    pnfts: Optional[CollectionWithItems[Pubkey]] = None
    cnfts: Optional[CollectionWithItems[Any]] = None
    token22: Optional[CollectionWithItems[Pubkey]] = None

    def as_dict(self) -> Dict[str, CollectionWithItems]:
        """Produced collections only, keyed by standard name."""
        items = {
            "core": self.core,
            "pnfts": self.pnfts,
            "cnfts": self.cnfts,
            "token22": self.token22,
        }
        return {name: c for name, c in items.items() if c is not None}
