"""Configuration constants and the user-facing Config for doxytree."""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Name of the compound manifest inside a Doxygen XML output directory.
INDEX_FILENAME: str = "index.xml"

# Config file location. First file found is used when no path is given.
CONFIG_FILES: list[Path] = [
    Path("doxytree.json"),
    Path("~/.config/doxytree.json").expanduser(),
]

# Compound kinds handled by each loading stage, in stage order.
LANGUAGE_KINDS: frozenset[str] = frozenset(
    {"namespace", "class", "struct", "interface", "function", "variable", "typedef", "enum"}
)
GROUP_KINDS: frozenset[str] = frozenset({"group"})
CONTAINER_KINDS: frozenset[str] = frozenset({"dir", "file"})


class Config(BaseModel):
    """Options that shape finalized content and rendered output."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_dir: Path = Field(
        default=Path("."), description="Directory rendered files are written under"
    )
    base_url: str = Field(default="", description="Prefix of every generated link")
    link_suffix: str = Field(default=".md", description="Suffix of every generated page link")
    link_lowercase: bool = False
    template_suffix: str = Field(default=".tmpl", min_length=1)
    strict_references: bool = False

    @field_validator("output_dir")
    @classmethod
    def _expand_output_dir(cls, value: Path) -> Path:
        return value.expanduser()


def resolve_config_file() -> Path | None:
    """Return the first existing file from CONFIG_FILES, or None."""
    for candidate in CONFIG_FILES:
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None) -> Config:
    """Load a Config from a JSON file.

    Args:
        path: Explicit config file. When None, CONFIG_FILES are searched and
            defaults are used if none exists.

    Returns:
        The validated Config.

    Raises:
        ValidationError: A key is unknown or a value has the wrong type.
    """
    if path is None:
        path = resolve_config_file()
        if path is None:
            return Config()

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        msg = f"Config file {str(path)!r} must contain a JSON object"
        raise ValueError(msg)
    return Config.model_validate(raw)
