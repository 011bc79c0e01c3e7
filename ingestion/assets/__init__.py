"""
ingestion/assets package

Helius Digital Asset Standard (DAS) client and normalization.
"""
from .das_client import HeliusDasClient, IndexerError
from .normalization import (
    Asset,
    AssetCreator,
    AssetKind,
    AssetParseError,
    CollectionInfo,
    CompressionInfo,
    classify_asset,
    parse_helius_asset,
)

__all__ = [
    'HeliusDasClient',
    'IndexerError',
    'Asset',
    'AssetCreator',
    'AssetKind',
    'AssetParseError',
    'CollectionInfo',
    'CompressionInfo',
    'classify_asset',
    'parse_helius_asset',
]
