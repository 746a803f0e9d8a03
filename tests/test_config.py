from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from prodwalk.config import DEFAULT_LAYOUT, Layout, layout_for_root, load_layout
from prodwalk.errors import ConfigParseError, ConfigValidationError
from prodwalk.prune import prune_modules
from prodwalk.walker import build_production_set


def test_defaults_describe_npm_layout() -> None:
    assert DEFAULT_LAYOUT == Layout(descriptor="package.json", modules_dir="node_modules", scope_prefix="@")


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    p = tmp_path / "prodwalk.toml"
    p.write_text("", encoding="utf-8")
    assert load_layout(p) == DEFAULT_LAYOUT


def test_layout_table_overrides_defaults(tmp_path: Path) -> None:
    p = tmp_path / "prodwalk.toml"
    p.write_text('[layout]\nmodules_dir = "deps"\n', encoding="utf-8")

    layout = load_layout(p)

    assert layout.modules_dir == "deps"
    assert layout.descriptor == "package.json"


def test_invalid_toml_surfaces_location(tmp_path: Path) -> None:
    p = tmp_path / "prodwalk.toml"
    p.write_text("[layout]\nmodules_dir =\n", encoding="utf-8")

    with pytest.raises(ConfigParseError) as exc:
        load_layout(p)

    msg = str(exc.value)
    assert "Invalid TOML in" in msg
    assert str(p) in msg
    assert re.search(r"line \d+, column \d+\)$", msg)


@pytest.mark.parametrize(
    "text, fragment",
    [
        ('version = 1\n', "unknown keys: version"),
        ('layout = "x"\n', "layout: expected table"),
        ('[layout]\nfoo = "x"\n', "layout: unknown keys: foo"),
        ('[layout]\ndescriptor = 3\n', "layout.descriptor: expected string"),
        ('[layout]\nmodules_dir = ""\n', "layout.modules_dir: must not be empty"),
        ('[layout]\nmodules_dir = "a/b"\n', "layout.modules_dir: must be a plain file name"),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, text: str, fragment: str) -> None:
    p = tmp_path / "prodwalk.toml"
    p.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigValidationError) as exc:
        load_layout(p)

    assert fragment in str(exc.value)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="file not found"):
        load_layout(tmp_path / "nope.toml")


def test_layout_for_root_precedence(tmp_path: Path) -> None:
    assert layout_for_root(tmp_path) == DEFAULT_LAYOUT

    (tmp_path / "prodwalk.toml").write_text('[layout]\nmodules_dir = "deps"\n', encoding="utf-8")
    assert layout_for_root(tmp_path).modules_dir == "deps"

    explicit = tmp_path / "other.toml"
    explicit.write_text('[layout]\nmodules_dir = "vendor"\n', encoding="utf-8")
    assert layout_for_root(tmp_path, explicit).modules_dir == "vendor"


def test_custom_layout_drives_walk_and_prune(tmp_path: Path) -> None:
    layout = Layout(descriptor="meta.json", modules_dir="deps", scope_prefix="~")
    root = tmp_path / "app"

    def pkg(path: Path, **fields) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / "meta.json").write_text(json.dumps(fields), encoding="utf-8")
        return path

    pkg(root, dependencies={"~org/a": "1"}, devDependencies={"b": "1"})
    a = pkg(root / "deps" / "~org" / "a")
    b = pkg(root / "deps" / "b")

    assert build_production_set(root, layout=layout) == {root, a}

    prune_modules(root, layout=layout)
    assert a.exists()
    assert not b.exists()
