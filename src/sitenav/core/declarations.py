"""Sidebar declaration files.

Sidebars are authored as literal nested data: a top-level mapping from
sidebar name to a list of entries. JSON and TOML files are supported.

TOML example::

    [[apiSidebar]]
    type = "doc"
    id = "intro"
    label = "Introduction"

    [[apiSidebar]]
    type = "category"
    label = "API Endpoints"
    collapsed = false
    items = [{ type = "doc", id = "api/balance" }]
"""

import json
import tomllib
from pathlib import Path

SUPPORTED_SUFFIXES = (".json", ".toml")


class DeclarationError(ValueError):
    """Sidebar declaration file cannot be read."""


def load_declarations(path: Path) -> dict[str, list[object]]:
    """Load sidebar declarations from a JSON or TOML file.

    Args:
        path: Path to declaration file

    Returns:
        Entry lists keyed by sidebar name, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        DeclarationError: If the file is unsupported or malformed
    """
    if path.suffix not in SUPPORTED_SUFFIXES:
        raise DeclarationError(
            f"Unsupported sidebar file '{path.name}' (expected one of: {', '.join(SUPPORTED_SUFFIXES)})",
        )
    if not path.exists():
        raise FileNotFoundError(f"Sidebar file not found: {path}")

    try:
        if path.suffix == ".toml":
            with path.open("rb") as f:
                data = tomllib.load(f)
        else:
            data = json.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise DeclarationError(f"Failed to parse {path}: {e}") from e

    return parse_declarations(data)


def parse_declarations(data: object) -> dict[str, list[object]]:
    """Validate the top-level shape of sidebar declarations.

    Entry shapes are checked later by the sidebar builder.
    """
    if not isinstance(data, dict):
        raise DeclarationError("Sidebar declarations must be a mapping of name to entries")

    declarations: dict[str, list[object]] = {}
    for name, entries in data.items():
        if not isinstance(entries, list):
            raise DeclarationError(f"Sidebar '{name}' must be a list of entries")
        declarations[name] = entries
    return declarations
