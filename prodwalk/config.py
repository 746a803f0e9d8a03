from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .errors import ConfigParseError, ConfigValidationError


try:  # Python 3.11+
    import tomllib as _tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover (dev envs < 3.11)
    import tomli as _tomllib  # type: ignore


CONFIG_FILENAME = "prodwalk.toml"


@dataclass(frozen=True)
class Layout:
    """On-disk conventions of an installed package tree.

    The defaults describe the npm layout: each package carries a
    `package.json` and keeps its installed dependencies in `node_modules/`,
    with scoped names (`@scope/name`) nested one directory deeper.
    """

    descriptor: str = "package.json"
    modules_dir: str = "node_modules"
    scope_prefix: str = "@"


DEFAULT_LAYOUT = Layout()


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigValidationError(path=path, message="file not found") from e
    except OSError as e:
        raise ConfigValidationError(path=path, message=f"unable to read file: {e}") from e

    try:
        data = _tomllib.loads(text)
    except Exception as e:
        # tomllib/tomli both raise TOMLDecodeError with msg/lineno/colno.
        msg = getattr(e, "msg", str(e))
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        raise ConfigParseError(path=path, message=str(msg), lineno=lineno, colno=colno) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(path=path, message="top-level TOML must be a table")
    return data


def _unknown_keys_message(unknown: set[str]) -> str:
    keys = ", ".join(sorted(unknown))
    return f"unknown keys: {keys}"


def _require_table(path: Path, value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigValidationError(path=path, message=f"{where}: expected table")
    return value


def _require_name(path: Path, value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ConfigValidationError(path=path, message=f"{where}: expected string")
    if not value.strip():
        raise ConfigValidationError(path=path, message=f"{where}: must not be empty")
    if "/" in value or "\\" in value:
        raise ConfigValidationError(path=path, message=f"{where}: must be a plain file name")
    return value


def parse_layout_toml(path: Path, data: dict[str, Any]) -> Layout:
    unknown = set(data) - {"layout"}
    if unknown:
        raise ConfigValidationError(path=path, message=_unknown_keys_message(unknown))

    raw = data.get("layout")
    if raw is None:
        return DEFAULT_LAYOUT
    table = _require_table(path, raw, "layout")

    unknown = set(table) - {"descriptor", "modules_dir", "scope_prefix"}
    if unknown:
        raise ConfigValidationError(path=path, message=f"layout: {_unknown_keys_message(unknown)}")

    layout = DEFAULT_LAYOUT
    if "descriptor" in table:
        layout = replace(layout, descriptor=_require_name(path, table["descriptor"], "layout.descriptor"))
    if "modules_dir" in table:
        layout = replace(layout, modules_dir=_require_name(path, table["modules_dir"], "layout.modules_dir"))
    if "scope_prefix" in table:
        layout = replace(
            layout,
            scope_prefix=_require_name(path, table["scope_prefix"], "layout.scope_prefix"),
        )
    return layout


def load_layout(path: str | Path) -> Layout:
    """Load a `prodwalk.toml` file.

    Example:

        [layout]
        descriptor = "package.json"
        modules_dir = "node_modules"
        scope_prefix = "@"
    """

    p = Path(path)
    return parse_layout_toml(p, _load_toml(p))


def layout_for_root(root: Path, config: Path | None = None) -> Layout:
    """Pick the layout for a root package.

    Precedence: explicit config path, then `<root>/prodwalk.toml`, then defaults.
    """

    if config is not None:
        return load_layout(config)
    default = root / CONFIG_FILENAME
    if default.is_file():
        return load_layout(default)
    return DEFAULT_LAYOUT
