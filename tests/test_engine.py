"""End-to-end tests for apiface.engine.generate on the petstore fixture.

Covers:
- Each partition strategy over the full operation set
- Filtering feeding partitioning, including the empty result
- Parameter ordering surfaced in the result
- API title used for interface naming
- Wiring plan assembly and pre-flight failures
- Collisions abort the run
- Determinism across repeated runs
"""

from __future__ import annotations

import logging

import pytest

from apiface import generate
from apiface.exceptions import (
    InvalidRetryConfiguration,
    NamingCollisionError,
    PolicyError,
    PolicyErrorKind,
)
from apiface.models import (
    GenerationResult,
    GenerationSettings,
    Operation,
    OperationSet,
    Parameter,
    ParameterLocation,
    PartitionStrategy,
    ReturnKind,
)


def _layout(result: GenerationResult) -> list[tuple[str, list[str]]]:
    return [(i.name, [m.name for m in i.methods]) for i in result.interfaces]


# ------------------------------------------------------------------ #
# Strategies
# ------------------------------------------------------------------ #


class TestStrategies:
    def test_default_single_interface(self, petstore_operations: list[Operation]) -> None:
        result = generate(petstore_operations)
        assert result.policy.partition_strategy == PartitionStrategy.NONE
        assert len(result.interfaces) == 1
        interface = result.interfaces[0]
        assert interface.name == "IApiClient"
        assert len(interface.methods) == 6
        assert result.wiring_plan is None

    def test_by_endpoint(self, petstore_operations: list[Operation]) -> None:
        result = generate(petstore_operations, {"partitionStrategy": "ByEndpoint"})
        assert len(result.interfaces) == 6
        for interface, op in zip(result.interfaces, petstore_operations):
            assert interface.name == f"I{op.id[0].upper()}{op.id[1:]}Endpoint"
            assert [m.name for m in interface.methods] == ["Execute"]

    def test_by_tag(self, petstore_operations: list[Operation]) -> None:
        result = generate(petstore_operations, {"multipleInterfaces": "ByTag"})
        assert _layout(result) == [
            ("IApiClientPets", ["ListPets", "CreatePet", "GetPetById"]),
            ("IApiClientStore", ["GetPetById", "PlaceOrder", "GetInventory"]),
            ("IApiClientUntagged", ["HealthCheck"]),
        ]

    def test_settings_instance_accepted(self, petstore_operations: list[Operation]) -> None:
        settings = GenerationSettings(partition_strategy=PartitionStrategy.BY_TAG)
        result = generate(petstore_operations, settings)
        assert len(result.interfaces) == 3


# ------------------------------------------------------------------ #
# Filtering and ordering
# ------------------------------------------------------------------ #


class TestFilteringAndOrdering:
    def test_filter_then_partition(self, petstore_operations: list[Operation]) -> None:
        result = generate(
            petstore_operations,
            {
                "partitionStrategy": "ByTag",
                "includeTags": ["store"],
                "includeDeprecated": False,
            },
        )
        assert _layout(result) == [
            ("IApiClientStore", ["GetPetById", "PlaceOrder"]),
        ]

    def test_deprecated_filtered_in_order(self) -> None:
        ops = [
            Operation(id="op1", method="get", path="/a", tags=["X"]),
            Operation(id="op2", method="get", path="/b", tags=["Y"], deprecated=True),
            Operation(id="op3", method="get", path="/c", tags=["X"]),
        ]
        result = generate(ops, {"includeDeprecated": False})
        assert _layout(result) == [("IApiClient", ["Op1", "Op3"])]

    def test_empty_result_warns(
        self, petstore_operations: list[Operation], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="apiface.engine"):
            result = generate(petstore_operations, {"includeTags": ["missing"]})
        assert result.interfaces == ()
        assert "No operations left after filtering" in caplog.text

    def test_no_operations(self) -> None:
        assert generate([]).interfaces == ()

    def test_optional_parameters_last(self) -> None:
        op = Operation(
            id="search",
            method="get",
            path="/search",
            parameters=[
                Parameter(name="req1", required=True, location=ParameterLocation.QUERY),
                Parameter(name="opt1", location=ParameterLocation.QUERY),
                Parameter(name="req2", required=True, location=ParameterLocation.QUERY),
                Parameter(name="opt2", location=ParameterLocation.QUERY),
            ],
        )
        result = generate([op], {"optionalParametersLast": True})
        method = result.interfaces[0].methods[0]
        assert [p.name for p in method.parameters] == ["req1", "req2", "opt1", "opt2"]

    def test_method_references_input_operation(
        self, petstore_operations: list[Operation]
    ) -> None:
        result = generate(petstore_operations)
        for method, op in zip(result.interfaces[0].methods, petstore_operations):
            assert method.operation is op

    def test_signature_flags(self, petstore_operations: list[Operation]) -> None:
        result = generate(
            petstore_operations,
            {"returnIApiResponse": True, "generateOperationHeaders": False},
        )
        get_pet = result.interfaces[0].methods[2]
        assert get_pet.return_kind == ReturnKind.WRAPPED_RESPONSE
        assert get_pet.accept_headers == ("application/json", "application/xml")
        assert [p.name for p in get_pet.parameters] == ["petId", "fields"]


# ------------------------------------------------------------------ #
# Title naming
# ------------------------------------------------------------------ #


class TestTitle:
    def test_title_names_interface(self, petstore_set: OperationSet) -> None:
        result = generate(petstore_set.operations, api_title=petstore_set.title)
        assert result.interfaces[0].name == "ISwaggerPetstore"

    def test_title_with_tags(self, petstore_set: OperationSet) -> None:
        result = generate(
            petstore_set.operations, {"partitionStrategy": "ByTag"}, petstore_set.title
        )
        assert result.interfaces[0].name == "ISwaggerPetstorePets"


# ------------------------------------------------------------------ #
# Failures
# ------------------------------------------------------------------ #


class TestFailures:
    def test_method_collision_aborts(self, petstore_operations: list[Operation]) -> None:
        with pytest.raises(NamingCollisionError) as exc_info:
            generate(petstore_operations, {"operationNameTemplate": "{httpMethod}"})
        assert exc_info.value.operation_ids == ("listPets", "getPetById")

    def test_bad_template_fails_before_operations(self) -> None:
        def _never_iterated():
            raise AssertionError("operations should not be consumed")
            yield  # pragma: no cover

        with pytest.raises(PolicyError) as exc_info:
            generate(_never_iterated(), {"operationNameTemplate": "{nope}"})
        assert exc_info.value.kind == PolicyErrorKind.UNKNOWN_PLACEHOLDER

    def test_invalid_retry(self, petstore_operations: list[Operation]) -> None:
        with pytest.raises(InvalidRetryConfiguration):
            generate(
                petstore_operations,
                {"dependencyInjection": {"useRetry": True, "maxRetryAttempts": 0}},
            )


# ------------------------------------------------------------------ #
# Wiring plan
# ------------------------------------------------------------------ #


class TestWiringPlan:
    def test_plan_assembled(self, petstore_operations: list[Operation]) -> None:
        result = generate(
            petstore_operations,
            {
                "dependencyInjectionSettings": {
                    "baseUrl": "https://petstore.example.com",
                    "httpMessageHandlers": ["AuthHandler", "LoggingHandler"],
                    "usePolly": True,
                    "pollyMaxRetryCount": 3,
                    "firstBackoffRetryInSeconds": 0.5,
                }
            },
        )
        plan = result.wiring_plan
        assert plan is not None
        assert plan.handlers == ("AuthHandler", "LoggingHandler")
        assert plan.base_url == "https://petstore.example.com"
        assert plan.retry is not None
        assert plan.retry.max_attempts == 3
        assert plan.retry.base_backoff_seconds == 0.5


# ------------------------------------------------------------------ #
# Determinism
# ------------------------------------------------------------------ #


class TestDeterminism:
    @pytest.mark.parametrize("strategy", ["None", "ByEndpoint", "ByTag"])
    def test_repeated_runs_equal(
        self, strategy: str, petstore_operations: list[Operation]
    ) -> None:
        settings = {
            "partitionStrategy": strategy,
            "includeTags": ["store", "pets"],
            "operationNameTemplate": "{operationId}Async",
            "dependencyInjection": {"handlerChain": ["A", "B"]},
        }
        first = generate(petstore_operations, settings)
        second = generate(petstore_operations, settings)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()
