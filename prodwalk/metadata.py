"""Package descriptor loading.

Only the three dependency maps matter to the walker. Version ranges are kept
as opaque strings; nothing here interprets them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .config import DEFAULT_LAYOUT, Layout
from .errors import MetadataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageMetadata:
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, path: Path) -> "PackageMetadata":
        return cls(
            dependencies=_dep_map(data, "dependencies", path=path),
            dev_dependencies=_dep_map(data, "devDependencies", path=path),
            optional_dependencies=_dep_map(data, "optionalDependencies", path=path),
        )


def _dep_map(data: Mapping[str, Any], key: str, *, path: Path) -> dict[str, str]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        # Old packages sometimes ship `"devDependencies": []`; it names nothing.
        logger.debug("%s in %s is %s, not an object; treating as empty", key, path, type(raw).__name__)
        return {}
    # Values are opaque; only key presence is meaningful.
    return {str(k): str(v) for k, v in raw.items()}


def load_metadata(module_path: Path, *, layout: Layout = DEFAULT_LAYOUT) -> PackageMetadata | None:
    """Read the descriptor of an installed module.

    Returns None when the descriptor is missing (a dead install, e.g. left
    behind by a package manager that does not clean up after itself).
    Raises MetadataError when it exists but is unreadable or not a JSON object.
    """

    p = module_path / layout.descriptor
    try:
        # utf-8-sig: some editors and publish tools prepend a BOM.
        raw = p.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise MetadataError(path=p, message=f"unable to read: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataError(path=p, message=f"invalid JSON ({e.msg} at line {e.lineno}, column {e.colno})") from e

    if not isinstance(data, Mapping):
        raise MetadataError(path=p, message="top-level value must be an object")
    return PackageMetadata.from_dict(data, path=p)
