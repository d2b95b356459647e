"""Unity project model: asset index and serialized object anchors."""

from .anchors import NO_ANCHOR, find_anchors
from .assets import Asset, AssetIndex, read_meta_guid

__all__ = [
    "Asset",
    "AssetIndex",
    "read_meta_guid",
    "find_anchors",
    "NO_ANCHOR",
]
