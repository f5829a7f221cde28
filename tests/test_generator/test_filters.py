"""Tests for apiface.generator.filters -- the stable operation filter.

Covers:
- No active rules keeps everything
- Deprecation rule
- Include-tag rule
- Include-path rule
- Tag and path rules intersected
- Order preservation and identity of survivors
- Empty result is not an error
"""

from __future__ import annotations

from typing import Any, Callable

from apiface.generator.filters import filter_operations
from apiface.models import GenerationPolicy, Operation


def _make_operation(
    op_id: str,
    *,
    path: str | None = None,
    tags: tuple[str, ...] = (),
    deprecated: bool = False,
) -> Operation:
    """Shortcut to create an Operation for testing."""
    return Operation(
        id=op_id,
        method="get",
        path=path if path is not None else f"/{op_id}",
        tags=tags,
        deprecated=deprecated,
    )


def _ids(operations: list[Operation]) -> list[str]:
    return [op.id for op in operations]


PolicyFactory = Callable[..., GenerationPolicy]


# ------------------------------------------------------------------ #
# Individual rules
# ------------------------------------------------------------------ #


class TestFilterRules:
    """Each rule in isolation."""

    def test_no_rules_keeps_everything(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        result = filter_operations(petstore_operations, policy_factory())
        assert result == petstore_operations

    def test_deprecated_dropped(self, policy_factory: PolicyFactory) -> None:
        ops = [
            _make_operation("op1", tags=("X",)),
            _make_operation("op2", tags=("Y",), deprecated=True),
            _make_operation("op3", tags=("X",)),
        ]
        result = filter_operations(ops, policy_factory(includeDeprecated=False))
        assert _ids(result) == ["op1", "op3"]

    def test_deprecated_kept_by_default(self, policy_factory: PolicyFactory) -> None:
        ops = [_make_operation("old", deprecated=True)]
        assert _ids(filter_operations(ops, policy_factory())) == ["old"]

    def test_include_tags(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        result = filter_operations(petstore_operations, policy_factory(includeTags=["store"]))
        assert _ids(result) == ["getPetById", "placeOrder", "getInventory"]

    def test_include_tags_drops_untagged(self, policy_factory: PolicyFactory) -> None:
        ops = [_make_operation("plain"), _make_operation("tagged", tags=("a",))]
        result = filter_operations(ops, policy_factory(includeTags=["a"]))
        assert _ids(result) == ["tagged"]

    def test_include_path_patterns(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        result = filter_operations(
            petstore_operations, policy_factory(includePathPatterns=["/pets"])
        )
        assert _ids(result) == ["listPets", "createPet"]

    def test_single_star_stays_in_segment(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        result = filter_operations(
            petstore_operations, policy_factory(includePathPatterns=["/pets", "/pets/*"])
        )
        assert _ids(result) == ["listPets", "createPet", "getPetById"]

    def test_pattern_does_not_admit_descendants(
        self, policy_factory: PolicyFactory
    ) -> None:
        ops = [
            _make_operation("listPets", path="/pets"),
            _make_operation("listPhotos", path="/pets/{petId}/photos"),
        ]
        result = filter_operations(ops, policy_factory(includePathPatterns=["/pets"]))
        assert _ids(result) == ["listPets"]

    def test_bare_name_is_anchored_at_root(self, policy_factory: PolicyFactory) -> None:
        ops = [_make_operation("listOwnerPets", path="/owners/{id}/pets")]
        assert filter_operations(ops, policy_factory(includePathPatterns=["pets"])) == []

    def test_globstar_crosses_segments(self, policy_factory: PolicyFactory) -> None:
        ops = [
            _make_operation("getPetById", path="/pets/{petId}"),
            _make_operation("listPhotos", path="/pets/{petId}/photos"),
            _make_operation("getStore", path="/petstore"),
        ]
        result = filter_operations(ops, policy_factory(includePathPatterns=["/pets/**"]))
        assert _ids(result) == ["getPetById", "listPhotos"]

    def test_any_pattern_admits(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        result = filter_operations(
            petstore_operations,
            policy_factory(includePathPatterns=["/health", "/store/*"]),
        )
        assert _ids(result) == ["placeOrder", "getInventory", "healthCheck"]


# ------------------------------------------------------------------ #
# Combined behaviour
# ------------------------------------------------------------------ #


class TestFilterCombination:
    """Rules are applied independently and intersected."""

    def test_tag_and_path_must_both_pass(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        policy = policy_factory(includeTags=["store"], includePathPatterns=["/pets/*"])
        assert _ids(filter_operations(petstore_operations, policy)) == ["getPetById"]

    def test_all_three_rules(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        policy = policy_factory(
            includeTags=["store"],
            includePathPatterns=["/store/*"],
            includeDeprecated=False,
        )
        assert _ids(filter_operations(petstore_operations, policy)) == ["placeOrder"]

    def test_nothing_survives(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        policy = policy_factory(includeTags=["pets"], includePathPatterns=["/store/*"])
        assert filter_operations(petstore_operations, policy) == []

    def test_empty_input(self, policy_factory: PolicyFactory) -> None:
        assert filter_operations([], policy_factory(includeTags=["x"])) == []


class TestFilterContract:
    """Ordering and identity guarantees."""

    def test_survivors_are_the_same_objects(
        self, petstore_operations: list[Operation], policy_factory: PolicyFactory
    ) -> None:
        result = filter_operations(petstore_operations, policy_factory(includeTags=["pets"]))
        for op in result:
            assert any(op is original for original in petstore_operations)

    def test_input_not_modified(self, policy_factory: PolicyFactory) -> None:
        ops = [_make_operation("a", deprecated=True), _make_operation("b")]
        snapshot = list(ops)
        filter_operations(ops, policy_factory(includeDeprecated=False))
        assert ops == snapshot

    def test_accepts_any_iterable(self, policy_factory: PolicyFactory) -> None:
        ops = (_make_operation(name) for name in ["a", "b", "c"])
        assert _ids(filter_operations(ops, policy_factory())) == ["a", "b", "c"]

    def test_stable_under_repetition(self, policy_factory: PolicyFactory) -> None:
        settings: dict[str, Any] = {"includeTags": ["x"]}
        ops = [
            _make_operation(f"op{i}", tags=("x",) if i % 2 else ("y",)) for i in range(10)
        ]
        first = filter_operations(ops, policy_factory(**settings))
        second = filter_operations(ops, policy_factory(**settings))
        assert _ids(first) == _ids(second) == ["op1", "op3", "op5", "op7", "op9"]
