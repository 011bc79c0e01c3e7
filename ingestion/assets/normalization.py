"""
ingestion/assets/normalization.py

Normalization of Helius DAS API asset records into one canonical Asset.

Every record is classified as exactly one AssetKind:
- COMPRESSED: compression.compressed is true (leaf in a concurrent Merkle tree)
- PROGRAMMABLE: token_standard "ProgrammableNonFungible" or interface "ProgrammableNFT"
- TOKEN_EXTENSIONS: interface "V1_NFT" with no token_standard (best effort, the
  mint's extension list is never checked)
- PLAIN: everything else
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from solders.pubkey import Pubkey

from programs.ids import DEFAULT_PNFT_RULE_SET


class AssetKind(str, Enum):
    PLAIN = "plain"
    PROGRAMMABLE = "programmable"
    COMPRESSED = "compressed"
    TOKEN_EXTENSIONS = "token_extensions"


@dataclass(frozen=True)
class AssetCreator:
    address: Pubkey
    share: int
    verified: bool


@dataclass(frozen=True)
class CollectionInfo:
    address: Pubkey
    verified: bool = True


@dataclass(frozen=True)
class CompressionInfo:
    """Leaf coordinates of a compressed asset."""
    leaf_id: int
    data_hash: Pubkey
    creator_hash: Pubkey
    asset_hash: Pubkey
    tree: Pubkey


@dataclass(frozen=True)
class Asset:
    """Canonical asset record."""
    mint: Pubkey
    owner: Optional[Pubkey]
    kind: AssetKind
    name: str = ""
    symbol: str = ""
    uri: str = ""
    frozen: bool = False
    collection: Optional[CollectionInfo] = None
    compression: Optional[CompressionInfo] = None
    creators: List[AssetCreator] = field(default_factory=list)
    links: Dict[str, Any] = field(default_factory=dict)
    rule_set: Optional[Pubkey] = None

    def __post_init__(self):
        if (self.kind == AssetKind.COMPRESSED) != (self.compression is not None):
            raise ValueError(
                f"Asset {self.mint}: compression info must be present iff kind is compressed"
            )

    @property
    def is_compressed(self) -> bool:
        return self.kind == AssetKind.COMPRESSED

    @property
    def is_programmable_nft(self) -> bool:
        return self.kind == AssetKind.PROGRAMMABLE

    @property
    def is_token_extensions(self) -> bool:
        return self.kind == AssetKind.TOKEN_EXTENSIONS


def _pubkey(value: Any, field_name: str) -> Pubkey:
    if not isinstance(value, str) or not value:
        raise AssetParseError(f"Missing or invalid {field_name}: {value!r}")
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise AssetParseError(f"Invalid {field_name} {value!r}: {e}") from e


def _mapping(value: Any, field_name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise AssetParseError(f"{field_name} must be an object, got {type(value).__name__}")
    return value


def _sequence(value: Any, field_name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise AssetParseError(f"{field_name} must be a list, got {type(value).__name__}")
    return value


def _int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise AssetParseError(f"Invalid {field_name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise AssetParseError(f"Invalid {field_name}: {value!r}") from e


def classify_asset(data: Dict[str, Any]) -> AssetKind:
    """Pick the single AssetKind of a raw DAS record."""
    compression = _mapping(data.get("compression"), "compression")
    if compression.get("compressed"):
        return AssetKind.COMPRESSED

    interface = data.get("interface", "")
    content = _mapping(data.get("content"), "content")
    metadata = _mapping(content.get("metadata"), "content.metadata")
    token_standard = metadata.get("token_standard")

    if token_standard == "ProgrammableNonFungible" or interface == "ProgrammableNFT":
        return AssetKind.PROGRAMMABLE
    if interface == "V1_NFT" and not token_standard:
        return AssetKind.TOKEN_EXTENSIONS
    return AssetKind.PLAIN


def parse_helius_asset(data: Dict[str, Any]) -> Asset:
    """
    Parse one DAS asset record.

    Args:
        data: Raw item from getAssetBatch / searchAssets

    Returns:
        Normalized Asset

    Raises:
        AssetParseError: if the record lacks an id, carries malformed
            addresses or numbers, or has a nested block of the wrong type
    """
    if not isinstance(data, dict):
        raise AssetParseError(f"Asset record must be an object, got {type(data).__name__}")

    mint = _pubkey(data.get("id"), "id")
    kind = classify_asset(data)

    content = _mapping(data.get("content"), "content")
    metadata = _mapping(content.get("metadata"), "content.metadata")
    ownership = _mapping(data.get("ownership"), "ownership")

    owner = ownership.get("owner")
    frozen = bool(
        ownership.get("frozen")
        or ownership.get("delegated")
        or ownership.get("delegate")
    )

    collection = None
    for group in _sequence(data.get("grouping"), "grouping"):
        group = _mapping(group, "grouping entry")
        if group.get("group_key") == "collection":
            collection = CollectionInfo(address=_pubkey(group.get("group_value"), "grouping.group_value"))
            break

    compression = None
    if kind == AssetKind.COMPRESSED:
        raw = data["compression"]
        compression = CompressionInfo(
            leaf_id=_int(raw.get("leaf_id"), "compression.leaf_id"),
            data_hash=_pubkey(raw.get("data_hash"), "compression.data_hash"),
            creator_hash=_pubkey(raw.get("creator_hash"), "compression.creator_hash"),
            asset_hash=_pubkey(raw.get("asset_hash"), "compression.asset_hash"),
            tree=_pubkey(raw.get("tree"), "compression.tree"),
        )

    creators = []
    for c in _sequence(data.get("creators"), "creators"):
        c = _mapping(c, "creators entry")
        creators.append(AssetCreator(
            address=_pubkey(c.get("address"), "creators.address"),
            share=_int(c.get("share", 0), "creators.share"),
            verified=bool(c.get("verified", False)),
        ))

    return Asset(
        mint=mint,
        owner=_pubkey(owner, "ownership.owner") if owner else None,
        kind=kind,
        name=metadata.get("name", "") or "",
        symbol=metadata.get("symbol", "") or "",
        uri=content.get("json_uri", "") or "",
        frozen=frozen,
        collection=collection,
        compression=compression,
        creators=creators,
        links=_mapping(content.get("links"), "content.links"),
        rule_set=DEFAULT_PNFT_RULE_SET if kind == AssetKind.PROGRAMMABLE else None,
    )


class AssetParseError(ValueError):
    """Raised when a DAS record cannot be normalized."""
    pass
