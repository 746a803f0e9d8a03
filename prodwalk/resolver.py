from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from .config import DEFAULT_LAYOUT, Layout
from .errors import ResolutionError

logger = logging.getLogger(__name__)


def abspath(path: str | os.PathLike[str]) -> Path:
    """Absolute, normalized path. Symlinks are deliberately left unresolved."""

    return Path(os.path.abspath(path))


def candidate_paths(name: str, from_dir: Path, *, layout: Layout = DEFAULT_LAYOUT) -> Iterator[Path]:
    """Yield every location where `name` may be installed, nearest first.

    Installs may be hoisted into any ancestor's modules dir, so after each
    miss we climb out of the current package and its enclosing modules dir.
    A scoped package sits one level deeper (`node_modules/@scope/pkg`) and
    needs one extra step up. Stops once the filesystem root stops moving.
    """

    cur = abspath(from_dir)
    last: Path | None = None
    while True:
        cand = cur / layout.modules_dir / name
        if cand == last:
            return
        yield cand
        last = cand
        if cur.parent.name != layout.modules_dir:
            cur = cur.parent
        cur = cur.parent.parent


def resolve_module(
    name: str,
    from_dir: Path,
    *,
    allow_missing: bool = False,
    layout: Layout = DEFAULT_LAYOUT,
) -> Path | None:
    """Locate the installed directory for dependency `name` as seen from `from_dir`.

    Returns None for a miss when `allow_missing` is set, otherwise raises
    ResolutionError.
    """

    for cand in candidate_paths(name, from_dir, layout=layout):
        if cand.exists():
            logger.debug("resolved %s from %s -> %s", name, from_dir, cand)
            return cand

    if not allow_missing:
        raise ResolutionError(name=name, from_dir=abspath(from_dir))
    logger.debug("missing %s from %s (tolerated)", name, from_dir)
    return None
