from __future__ import annotations

from .config import DEFAULT_LAYOUT, Layout, load_layout
from .errors import ConfigError, MetadataError, ResolutionError, WalkerError
from .ignore import build_ignore_predicate, copy_production_tree, copytree_ignore
from .metadata import PackageMetadata, load_metadata
from .prune import PruneResult, prune_modules
from .resolver import resolve_module
from .walker import build_production_set

__all__ = [
    "ConfigError",
    "DEFAULT_LAYOUT",
    "Layout",
    "MetadataError",
    "PackageMetadata",
    "PruneResult",
    "ResolutionError",
    "WalkerError",
    "build_ignore_predicate",
    "build_production_set",
    "copy_production_tree",
    "copytree_ignore",
    "load_layout",
    "load_metadata",
    "prune_modules",
    "resolve_module",
]
