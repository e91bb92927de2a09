"""Manifest loaders — JSON and YAML package lists."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

Entries = list[tuple[str, list[str]]]


class ManifestError(Exception):
    """Raised when a manifest cannot be decoded or has the wrong shape."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        detail = f" ({self.path})" if self.path else ""
        super().__init__(f"{message}{detail}")


# ── Shared schema ────────────────────────────────────────────


def _entries_from_document(data: object, path: Path) -> Entries:
    """Validate a decoded manifest and return ``(name, [deps])`` pairs.

    Expected structure::

        {"packages": [{"name": "A", "dependencies": ["B", "C"]}, ...]}

    ``packages`` may also be a mapping ``{name: [deps]}``, where an empty
    value means no dependencies.
    """
    if not isinstance(data, dict) or "packages" not in data:
        raise ManifestError("Manifest must be an object with a 'packages' key", path)

    packages = data["packages"]
    if isinstance(packages, dict):
        entries: Entries = []
        for name, deps in packages.items():
            if not isinstance(name, str) or not name:
                raise ManifestError(f"Package name {name!r} must be a string", path)
            entries.append((name, _dependency_list(deps, name, path)))
        return entries
    if not isinstance(packages, list):
        raise ManifestError("'packages' must be a list or a mapping", path)

    entries = []
    for index, item in enumerate(packages):
        if not isinstance(item, dict):
            raise ManifestError(f"Package entry #{index} must be an object", path)
        name = item.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestError(f"Package entry #{index} has no 'name'", path)
        entries.append((name, _dependency_list(item.get("dependencies"), name, path)))
    return entries


def _dependency_list(raw: object, name: str, path: Path) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ManifestError(f"Dependencies for '{name}' must be a list or empty", path)
    for dep in raw:
        if not isinstance(dep, str):
            raise ManifestError(f"Dependency {dep!r} of '{name}' must be a string", path)
    return list(raw)


def _read_text(filepath: Path) -> str:
    try:
        return filepath.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestError(f"Cannot decode manifest as UTF-8: {e}", filepath) from e


# ── JSON ─────────────────────────────────────────────────────


def parse_json(filepath: str | Path) -> Entries:
    """Parse a JSON manifest into ``[(name, [deps])]`` in document order."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    try:
        data = json.loads(_read_text(filepath))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON: {e}", filepath) from e

    entries = _entries_from_document(data, filepath)
    logger.debug("Loaded %d package entries from %s", len(entries), filepath)
    return entries


# ── YAML ─────────────────────────────────────────────────────


def parse_yaml(filepath: str | Path) -> Entries:
    """Parse a YAML manifest; same schema as the JSON form.

    Example::

        packages:
          app: [auth, database]
          auth: [crypto]
          crypto: []
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    try:
        data = yaml.safe_load(_read_text(filepath))
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML: {e}", filepath) from e

    entries = _entries_from_document(data, filepath)
    logger.debug("Loaded %d package entries from %s", len(entries), filepath)
    return entries


# ── Auto-detection ───────────────────────────────────────────


def detect_format(filepath: str | Path) -> str:
    """Detect manifest format by extension: ``'json'`` or ``'yaml'``."""
    ext = Path(filepath).suffix.lower()
    if ext == ".json":
        return "json"
    if ext in (".yaml", ".yml"):
        return "yaml"
    raise ManifestError(f"Unsupported manifest format: {Path(filepath).name}")


def parse_manifest(filepath: str | Path) -> Entries:
    """Auto-detect format and parse the manifest."""
    if detect_format(filepath) == "yaml":
        return parse_yaml(filepath)
    return parse_json(filepath)
