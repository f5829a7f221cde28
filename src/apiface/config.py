"""Settings file discovery, loading, saving, and precedence resolution.

Generation settings normally live in a settings file committed next to the
API description (``apiface.json`` or ``apiface.yaml``). This module handles:

* **Discovery** -- :func:`find_settings_file` checks ``$APIFACE_SETTINGS``,
  then the well-known file names in a directory.
* **Loading / saving** -- :func:`load_settings` and :func:`save_settings`
  read and write JSON or YAML by extension. Writes are atomic
  (:func:`_atomic_write`).
* **Precedence resolution** -- :func:`resolve_settings` merges explicit
  overrides, environment variables, the settings file, and defaults.

Raw settings accept several spellings for the same key (``partitionStrategy``,
``multipleInterfaces``, ``partition_strategy``). Before layers are merged
every key is rewritten to its canonical camelCase spelling, so an override
always replaces the value it targets regardless of how either side spelled
it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import AliasChoices, BaseModel, ValidationError

from apiface.documents import format_hint, read_document
from apiface.exceptions import ConfigError
from apiface.models import (
    DependencyInjectionSettings,
    GenerationSettings,
    NamingSettings,
)

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "APIFACE_SETTINGS"
SETTINGS_FILENAMES = ("apiface.json", "apiface.yaml", "apiface.yml")

_ENV_OVERRIDES: dict[str, str] = {
    "APIFACE_NAMESPACE": "namespace",
    "APIFACE_PARTITION_STRATEGY": "partitionStrategy",
    "APIFACE_INTERFACE_BASE_NAME": "interfaceBaseName",
    "APIFACE_OPERATION_NAME_TEMPLATE": "operationNameTemplate",
}

_NESTED_SETTINGS: dict[str, type[BaseModel]] = {
    "naming": NamingSettings,
    "dependencyInjection": DependencyInjectionSettings,
}


# --- Discovery ---


def find_settings_file(directory: Optional[Path] = None) -> Optional[Path]:
    """Locate the settings file to use.

    ``$APIFACE_SETTINGS`` wins when set. Otherwise *directory* (default: the
    working directory) is searched for ``apiface.json``, ``apiface.yaml``
    and ``apiface.yml``, in that order.

    Returns:
        The settings file path, or ``None`` if there is none.

    Raises:
        ConfigError: If ``$APIFACE_SETTINGS`` points at a missing file.
    """
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        if not path.is_file():
            raise ConfigError(
                f"Settings file from ${SETTINGS_ENV_VAR} not found: {path}"
            )
        return path

    base = directory if directory is not None else Path.cwd()
    for name in SETTINGS_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


# --- Loading and saving ---


def load_settings(path: Path) -> GenerationSettings:
    """Load and validate a settings file.

    Args:
        path: A ``.json``, ``.yaml`` or ``.yml`` file (other extensions are
            sniffed).

    Returns:
        The deserialised :class:`~apiface.models.GenerationSettings`.

    Raises:
        ConfigError: If the file does not exist, cannot be parsed, or fails
            Pydantic validation.
    """
    data = _load_mapping(Path(path))
    try:
        return GenerationSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc


def save_settings(settings: GenerationSettings, path: Path) -> None:
    """Persist *settings* atomically, as YAML for ``.yaml``/``.yml`` and JSON otherwise.

    Keys are written in their canonical camelCase spelling; unset optional
    values are omitted and renderer-only extra keys are kept.
    """
    path = Path(path)
    data = settings.model_dump(mode="json", by_alias=True, exclude_none=True)
    if format_hint(path) == "yaml":
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2) + "\n"
    _atomic_write(path, text)


def _load_mapping(path: Path) -> dict[str, Any]:
    data = read_document(path, ConfigError)
    if not isinstance(data, dict):
        raise ConfigError(
            f"Settings file {path} must contain an object (got {type(data).__name__})"
        )
    logger.debug("Loaded settings from %s", path)
    return data


# --- Atomic file writes ---


def _atomic_write(path: Path, text: str) -> None:
    """Replace *path* with *text* through a sibling temp file and ``os.replace``.

    A reader sees either the old settings or the new ones. The temp file is
    removed if anything fails before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(handle.name)
    try:
        with handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote settings to %s", path)


# --- Precedence resolution ---


def resolve_settings(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GenerationSettings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. *overrides* (e.g. values supplied programmatically by a caller)
        2. Environment variables (``APIFACE_NAMESPACE``,
           ``APIFACE_PARTITION_STRATEGY``, ``APIFACE_INTERFACE_BASE_NAME``,
           ``APIFACE_OPERATION_NAME_TEMPLATE``)
        3. The settings file (*path*, else :func:`find_settings_file`)
        4. Defaults

    Nested sections (``naming``, ``dependencyInjection``) are merged key by
    key.

    Raises:
        ConfigError: If the settings file is unreadable or the merged
            settings fail validation.
    """
    merged: dict[str, Any] = {}

    settings_path = Path(path) if path is not None else find_settings_file()
    if settings_path is not None:
        merged = canonicalize_settings(_load_mapping(settings_path))

    env_layer = {
        key: os.environ[var]
        for var, key in _ENV_OVERRIDES.items()
        if os.environ.get(var)
    }
    merged = _deep_merge(merged, env_layer)

    if overrides:
        merged = _deep_merge(merged, canonicalize_settings(overrides))

    try:
        return GenerationSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


def canonicalize_settings(
    data: Mapping[str, Any],
    model: type[BaseModel] = GenerationSettings,
) -> dict[str, Any]:
    """Rewrite every known key of *data* to its canonical camelCase spelling.

    Unknown keys are kept untouched.

    Example::

        >>> canonicalize_settings({"multipleInterfaces": "byTag", "usePolly": 1})
        {'partitionStrategy': 'byTag', 'usePolly': 1}
    """
    lookup: dict[str, str] = {}
    for name, field in model.model_fields.items():
        canonical = field.serialization_alias or name
        lookup[name] = canonical
        if isinstance(field.validation_alias, AliasChoices):
            for choice in field.validation_alias.choices:
                if isinstance(choice, str):
                    lookup[choice] = canonical

    nested = _NESTED_SETTINGS if model is GenerationSettings else {}
    result: dict[str, Any] = {}
    for key, value in data.items():
        canonical = lookup.get(key, key)
        if canonical in nested and isinstance(value, Mapping):
            value = canonicalize_settings(value, nested[canonical])
        result[canonical] = value
    return result


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result
