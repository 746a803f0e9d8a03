"""Ignore predicates for copy/archive steps.

Instead of deleting dev-only modules in place, a packager can copy the root
package and skip every installed directory that is not part of the
production set.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable

from .config import DEFAULT_LAYOUT, Layout
from .resolver import abspath
from .walker import build_production_set

logger = logging.getLogger(__name__)

IgnorePredicate = Callable[[str | os.PathLike[str]], bool]


def nearest_module_dir(path: str | os.PathLike[str], *, layout: Layout = DEFAULT_LAYOUT) -> Path | None:
    """Closest directory at or above `path` that holds a package descriptor."""

    cur = abspath(path)
    while True:
        if cur.is_dir() and (cur / layout.descriptor).exists():
            return cur
        if cur.parent == cur:
            return None
        cur = cur.parent


def _is_within(path: Path, base: Path) -> bool:
    return path == base or base in path.parents


def build_ignore_predicate(root: str | os.PathLike[str], *, layout: Layout = DEFAULT_LAYOUT) -> IgnorePredicate:
    """Build a `path -> should_skip` function for the package at `root`.

    The production set is computed once, up front. Anything outside
    `<root>/node_modules` is never skipped; inside it, a path is skipped when
    the package that owns it is not a production module.
    """

    root_path = abspath(root)
    prod = build_production_set(root_path, layout=layout)
    modules = root_path / layout.modules_dir

    def should_skip(path: str | os.PathLike[str]) -> bool:
        p = abspath(path)
        if not _is_within(p, modules):
            return False
        return nearest_module_dir(p, layout=layout) not in prod

    return should_skip


def copytree_ignore(predicate: IgnorePredicate) -> Callable[[str, list[str]], set[str]]:
    """Adapt a path predicate to the `ignore` callback of shutil.copytree."""

    def _ignore(src_dir: str, names: list[str]) -> set[str]:
        return {n for n in names if predicate(os.path.join(src_dir, n))}

    return _ignore


def copy_production_tree(
    root: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    *,
    layout: Layout = DEFAULT_LAYOUT,
) -> Path:
    """Copy the package at `root` to `dest` without its non-production modules."""

    root_path = abspath(root)
    dest_path = abspath(dest)
    if _is_within(dest_path, root_path):
        raise ValueError(f"copy destination {dest_path} must not be inside {root_path}")

    predicate = build_ignore_predicate(root_path, layout=layout)
    shutil.copytree(root_path, dest_path, symlinks=True, ignore=copytree_ignore(predicate))
    logger.info("copied %s -> %s", root_path, dest_path)
    return dest_path
