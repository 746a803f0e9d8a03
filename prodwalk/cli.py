from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import DEFAULT_LAYOUT, layout_for_root
from .errors import ConfigError, MetadataError, ResolutionError
from .ignore import copy_production_tree
from .prune import prune_modules
from .resolver import abspath
from .walker import build_production_set


def _find_package_root(start: Path, descriptor: str) -> Path | None:
    """Find the nearest parent containing a package descriptor."""

    cur = abspath(start)
    for p in (cur, *cur.parents):
        if (p / descriptor).is_file():
            return p
    return None


def _select_root(args: argparse.Namespace) -> Path:
    if args.root is not None:
        return abspath(Path(args.root).expanduser())
    detected = _find_package_root(Path.cwd(), DEFAULT_LAYOUT.descriptor)
    return detected or abspath(Path.cwd())


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s | %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="prodwalk",
        description="Find, prune or copy only the production dependencies of an installed package",
    )
    p.add_argument("--root", type=Path, default=None, help="Root package dir (default: nearest parent with package.json)")
    p.add_argument("--config", type=Path, default=None, help="Layout config file (default: <root>/prodwalk.toml)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="Print the production module directories")
    ls.add_argument("--json", dest="json_output", action="store_true", help="Output as JSON")

    sub.add_parser("prune", help="Delete installed modules not needed in production")

    cp = sub.add_parser("copy", help="Copy the root package without its non-production modules")
    cp.add_argument("dest", type=Path)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return _run(args)
    except ConfigError as e:
        print(f"error: {e}")
        return 2
    except MetadataError as e:
        print(f"error: {e}")
        return 2
    except ResolutionError as e:
        print(f"error: {e}")
        return 3
    except ValueError as e:
        print(f"error: {e}")
        return 2
    except OSError as e:
        print(f"error: {e}")
        return 1
    except Exception as e:
        print(f"error: {e}")
        return 1


def _run(args: argparse.Namespace) -> int:
    root = _select_root(args)
    layout = layout_for_root(root, args.config)

    if args.cmd == "list":
        prod = sorted(str(p) for p in build_production_set(root, layout=layout))
        if args.json_output:
            print(json.dumps({"root": str(root), "production": prod}, indent=2, sort_keys=True))
        else:
            for p in prod:
                print(p)
        return 0

    if args.cmd == "prune":
        res = prune_modules(root, layout=layout)
        for p in res.removed:
            print(f"- {p}")
        print(f"Removed {len(res.removed)} non-production module(s)")
        return 0

    if args.cmd == "copy":
        out = copy_production_tree(root, args.dest, layout=layout)
        print(str(out))
        return 0

    raise AssertionError(f"unhandled command: {args.cmd}")  # pragma: no cover
