"""Parse JSON or YAML documents with format auto-detection.

Shared by the settings loader (:mod:`apiface.config`) and the operation
loader (:mod:`apiface.loader`). Each caller passes the exception class it
wants parse failures reported as.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from apiface.exceptions import ApifaceError


def format_hint(path: Path) -> str:
    """Return ``"json"``, ``"yaml"`` or ``""`` from the file extension."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return ""


def read_document(path: Path, error_cls: type[ApifaceError]) -> Any:
    """Read and parse the JSON/YAML file at *path*.

    Raises:
        error_cls: If the file is missing, unreadable, empty, or unparseable.
    """
    if not path.is_file():
        raise error_cls(f"File not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise error_cls(f"Failed to read {path}: {exc}") from exc
    if not content.strip():
        raise error_cls(f"File is empty: {path}")
    return parse_content(content, error_cls, hint=format_hint(path))


def parse_content(content: str, error_cls: type[ApifaceError], hint: str = "") -> Any:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is ``"yaml"``), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        error_cls: Exception class raised on failure.
        hint: Optional format hint (``"json"`` or ``"yaml"``).

    Returns:
        The parsed document (a mapping or a list for well-formed inputs).

    Raises:
        error_cls: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise error_cls(f"Invalid JSON: {exc}") from exc

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise error_cls(msg)
