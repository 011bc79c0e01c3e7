"""
minting package

Fixture asset issuers for the four supported standards and the aggregator
that fans them out.
"""
from .aggregator import AssetAggregator
from .compressed import CompressedMintIssuer
from .merkle_tree import MerkleTree, MerkleTreeProvisioner
from .models import (
    AssetCounts,
    AssetResponse,
    AssetStandard,
    CollectionWithItems,
)
from .standard import CoreAssetIssuer, StandardMintIssuer
from .token22 import (
    ExtensionGroupIssuer,
    ExtensionMemberIssuer,
    FungibleExtensionIssuer,
    GroupRef,
    TokenMetadataParams,
)
from .traits import TraitSpec, transform_traits_data

__all__ = [
    'AssetAggregator',
    'AssetCounts',
    'AssetResponse',
    'AssetStandard',
    'CollectionWithItems',
    'CompressedMintIssuer',
    'CoreAssetIssuer',
    'ExtensionGroupIssuer',
    'ExtensionMemberIssuer',
    'FungibleExtensionIssuer',
    'GroupRef',
    'MerkleTree',
    'MerkleTreeProvisioner',
    'StandardMintIssuer',
    'TokenMetadataParams',
    'TraitSpec',
    'transform_traits_data',
]
