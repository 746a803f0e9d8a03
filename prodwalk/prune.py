from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_LAYOUT, Layout
from .resolver import abspath
from .walker import build_production_set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PruneResult:
    removed: tuple[str, ...]


def _rm_any(path: Path) -> bool:
    """Delete a file, symlink or directory tree. Returns False if it was already gone."""

    if path.is_symlink() or path.is_file():
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True
    if not path.exists():
        return False
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        # Something else removed part of the tree under us.
        if path.exists():
            raise
    return True


def _iter_entries(dir_path: Path) -> list[Path]:
    try:
        return sorted(dir_path.iterdir())
    except FileNotFoundError:
        return []


def _prune_module(module_path: Path, prod: frozenset[Path], layout: Layout, removed: list[str]) -> None:
    if module_path not in prod:
        if _rm_any(module_path):
            logger.debug("removed %s", module_path)
            removed.append(str(module_path))
        return

    modules = module_path / layout.modules_dir
    if not modules.is_dir():
        return

    for entry in _iter_entries(modules):
        if entry.name.startswith(layout.scope_prefix) and entry.is_dir():
            for scoped in _iter_entries(entry):
                _prune_module(scoped, prod, layout, removed)
        else:
            _prune_module(entry, prod, layout, removed)


def prune_modules(root: str | os.PathLike[str], *, layout: Layout = DEFAULT_LAYOUT) -> PruneResult:
    """Delete every installed module under `root` that is not needed in production.

    This is destructive and has no dry-run mode; use build_production_set to
    preview. A crash mid-way leaves a partially pruned tree, and re-running
    finishes the job.
    """

    root_path = abspath(root)
    prod = build_production_set(root_path, layout=layout)

    removed: list[str] = []
    _prune_module(root_path, prod, layout, removed)
    logger.info("pruned %d module(s) from %s", len(removed), root_path)
    return PruneResult(removed=tuple(removed))
