"""Production dependency graph.

Starting at the root package, follow `dependencies` and `optionalDependencies`
edges through the installed tree and collect every module directory reached.
`devDependencies` are never followed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import DEFAULT_LAYOUT, Layout
from .metadata import load_metadata
from .resolver import abspath, resolve_module

logger = logging.getLogger(__name__)


def _visit(module_path: Path, allow_missing: bool, prod: set[Path], layout: Layout) -> None:
    # Membership check is the only thing stopping infinite recursion on cycles.
    if module_path in prod:
        return
    prod.add(module_path)
    logger.debug("visit %s (allow_missing=%s)", module_path, allow_missing)

    meta = load_metadata(module_path, layout=layout)
    if meta is None:
        logger.debug("no %s in %s, treating as leaf", layout.descriptor, module_path)
        return

    # Inside an optional branch allow_missing stays True, so even the required
    # deps of an optional package may be absent without failing the walk.
    for name in meta.dependencies:
        found = resolve_module(name, module_path, allow_missing=allow_missing, layout=layout)
        if found is not None:
            _visit(found, allow_missing, prod, layout)

    for name in meta.optional_dependencies:
        found = resolve_module(name, module_path, allow_missing=True, layout=layout)
        if found is not None:
            _visit(found, True, prod, layout)


def build_production_set(root: str | os.PathLike[str], *, layout: Layout = DEFAULT_LAYOUT) -> frozenset[Path]:
    """Return the root plus every module directory it needs at runtime.

    Raises ResolutionError if a required dependency (outside any optional
    branch) is not installed anywhere it could be found.
    """

    root_path = abspath(root)
    prod: set[Path] = set()
    _visit(root_path, False, prod, layout)
    logger.info("production set for %s: %d module(s)", root_path, len(prod))
    return frozenset(prod)
