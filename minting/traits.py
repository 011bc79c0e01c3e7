"""
minting/traits.py

Flattening of character trait catalogs into per-trait fixture specs.
"""
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class TraitSpec:
    label: str
    name: str
    uri: str


def transform_traits_data(traits: Dict[str, Dict[str, str]]) -> List[TraitSpec]:
    """
    {category: {name: uri}} -> [TraitSpec(category, name, uri), ...]

    Order follows the input mappings.
    """
    return [
        TraitSpec(label=label, name=name, uri=uri)
        for label, items in traits.items()
        for name, uri in items.items()
    ]
