"""Shared test fixtures for apiface.

Provides reusable fixtures for loading the operation fixtures, resolving
policies inline, and isolating the settings environment.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from apiface.models import GenerationPolicy, Operation, OperationSet


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Operation fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_set() -> OperationSet:
    """The petstore operation set loaded from ``fixtures/petstore_operations.json``."""
    from apiface.loader import load_operations

    return load_operations(FIXTURES_DIR / "petstore_operations.json")


@pytest.fixture
def petstore_operations(petstore_set: OperationSet) -> list[Operation]:
    """Just the petstore operations, in document order."""
    return list(petstore_set.operations)


# ---------------------------------------------------------------------------
# Policy fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def policy_factory() -> Callable[..., GenerationPolicy]:
    """Resolve a policy from keyword settings (camelCase or snake_case)."""
    from apiface.policy import resolve_policy

    def _make(**settings: Any) -> GenerationPolicy:
        return resolve_policy(settings)

    return _make


# ---------------------------------------------------------------------------
# Settings isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate settings discovery to a temporary directory.

    Clears all APIFACE_* environment variables and changes the working
    directory to tmp_path so that tests never pick up a real settings file.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "APIFACE_SETTINGS",
        "APIFACE_NAMESPACE",
        "APIFACE_PARTITION_STRATEGY",
        "APIFACE_INTERFACE_BASE_NAME",
        "APIFACE_OPERATION_NAME_TEMPLATE",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path
