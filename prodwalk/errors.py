from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class WalkerError(Exception):
    """Base exception for dependency walking failures."""


@dataclass(eq=False)
class ResolutionError(WalkerError):
    """Raised when a required dependency cannot be located in any ancestor install dir."""

    name: str
    from_dir: Path

    def __str__(self) -> str:
        return (
            f'Failed to locate module "{self.name}" from "{self.from_dir}". '
            "This usually means the package was already deleted (check any ignore rules "
            "applied before this step) or the module installation is incomplete."
        )


@dataclass(eq=False)
class MetadataError(WalkerError):
    """Raised when a package descriptor exists but cannot be parsed."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"Invalid package descriptor {self.path}: {self.message}"


class ConfigError(Exception):
    """Base exception for prodwalk config parsing/validation errors."""


@dataclass(eq=False)
class ConfigParseError(ConfigError):
    """Raised when a TOML file cannot be parsed."""

    path: Path
    message: str
    lineno: int | None = None
    colno: int | None = None

    def __str__(self) -> str:
        loc = ""
        if self.lineno is not None and self.colno is not None:
            loc = f" (line {self.lineno}, column {self.colno})"
        return f"Invalid TOML in {self.path}: {self.message}{loc}"


@dataclass(eq=False)
class ConfigValidationError(ConfigError):
    """Raised when a parsed TOML file does not match the expected schema."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"Invalid config in {self.path}: {self.message}"
