"""Canonical Pydantic models shared across all apiface modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Input models** -- normalized operations produced by an external API
description parser:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`Operation`, and :class:`OperationSet`.

**Settings and policy models** -- raw user settings and the resolved,
immutable policy built from them by :func:`~apiface.policy.resolve_policy`:
    :class:`NamingSettings`, :class:`DependencyInjectionSettings`,
    :class:`GenerationSettings`, :class:`Placeholder`, :class:`TemplatePart`,
    :class:`NameTemplate`, :class:`DependencyInjectionPolicy`, and
    :class:`GenerationPolicy`.

**Output models** -- the decisions handed to the external renderer:
    :class:`MethodSignature`, :class:`InterfaceDefinition`,
    :class:`RetryPolicy`, :class:`ClientWiringPlan`, and
    :class:`GenerationResult`.

Input, policy, and output models are frozen. Raw settings accept both the
camelCase keys of the settings file and the snake_case field names, and
preserve unknown (renderer-only) keys in ``model_extra``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# --- Operations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods an :class:`Operation` can represent."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Where a parameter travels in the HTTP request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"


class Parameter(BaseModel):
    """A single operation parameter.

    ``schema_type`` is an opaque type tag produced by the external schema
    mapper; the engine never interprets it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(
        validation_alias=AliasChoices("location", "in")
    )
    required: bool = False
    schema_type: str = Field(
        default="string",
        validation_alias=AliasChoices("schema_type", "schemaType", "type"),
    )
    description: Optional[str] = None


class Operation(BaseModel):
    """One API action (HTTP method + path) with its parameters and tags.

    Produced by the external parser and referenced, never copied or mutated,
    by the engine. Every :class:`MethodSignature` built from an operation
    holds the very same instance.

    ``tags`` keeps declaration order with duplicates and blank tags removed;
    the first tag is the operation's *primary tag*. An operation whose tags
    are all blank is untagged. ``produces`` lists the response content
    types used for ``Accept`` headers.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "operationId", "operation_id"))
    method: HTTPMethod = Field(validation_alias=AliasChoices("method", "httpMethod"))
    path: str
    parameters: tuple[Parameter, ...] = ()
    tags: tuple[str, ...] = ()
    deprecated: bool = False
    summary: Optional[str] = None
    produces: tuple[str, ...] = ()

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(tag for tag in value if tag.strip()))

    @field_validator("parameters")
    @classmethod
    def _unique_parameter_names(
        cls, value: tuple[Parameter, ...]
    ) -> tuple[Parameter, ...]:
        seen: set[str] = set()
        for param in value:
            if param.name in seen:
                raise ValueError(f"duplicate parameter name '{param.name}'")
            seen.add(param.name)
        return value

    @property
    def primary_tag(self) -> Optional[str]:
        """The first declared tag, or ``None`` for an untagged operation."""
        return self.tags[0] if self.tags else None


class OperationSet(BaseModel):
    """A normalized operation set as read by :func:`~apiface.loader.load_operations`."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    operations: tuple[Operation, ...] = ()


# --- Raw settings ---


class PartitionStrategy(str, enum.Enum):
    """How operations are grouped into client interfaces."""

    NONE = "None"
    BY_ENDPOINT = "ByEndpoint"
    BY_TAG = "ByTag"


class ReturnKind(str, enum.Enum):
    """Whether a generated method returns the payload or a response wrapper."""

    RAW_PAYLOAD = "raw"
    WRAPPED_RESPONSE = "wrapped"


class TypeAccessibility(str, enum.Enum):
    """Visibility of the generated interfaces."""

    PUBLIC = "public"
    INTERNAL = "internal"


_STRATEGY_SPELLINGS: dict[str, PartitionStrategy] = {
    "none": PartitionStrategy.NONE,
    "unset": PartitionStrategy.NONE,
    "byendpoint": PartitionStrategy.BY_ENDPOINT,
    "bytag": PartitionStrategy.BY_TAG,
}


class NamingSettings(BaseModel):
    """Interface naming knobs nested under the ``naming`` key."""

    model_config = ConfigDict(populate_by_name=True)

    use_openapi_title: bool = Field(
        default=True,
        validation_alias=AliasChoices("useOpenApiTitle", "use_openapi_title"),
        serialization_alias="useOpenApiTitle",
    )
    interface_name: str = Field(
        default="ApiClient",
        validation_alias=AliasChoices("interfaceName", "interface_name"),
        serialization_alias="interfaceName",
    )


class DependencyInjectionSettings(BaseModel):
    """Raw handler chain and retry settings under ``dependencyInjection``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("baseUrl", "base_url"),
        serialization_alias="baseUrl",
    )
    handler_chain: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "handlerChain", "httpMessageHandlers", "handler_chain"
        ),
        serialization_alias="handlerChain",
    )
    use_retry: bool = Field(
        default=False,
        validation_alias=AliasChoices("useRetry", "usePolly", "use_retry"),
        serialization_alias="useRetry",
    )
    max_retry_attempts: int = Field(
        default=6,
        validation_alias=AliasChoices(
            "maxRetryAttempts", "pollyMaxRetryCount", "max_retry_attempts"
        ),
        serialization_alias="maxRetryAttempts",
    )
    first_backoff_seconds: float = Field(
        default=1.0,
        validation_alias=AliasChoices(
            "firstBackoffSeconds", "firstBackoffRetryInSeconds", "first_backoff_seconds"
        ),
        serialization_alias="firstBackoffSeconds",
    )


class GenerationSettings(BaseModel):
    """User-supplied generation settings, as read from a settings file.

    Every field has a default, so an empty mapping is a valid settings
    document. This model is deliberately permissive: cross-field validation
    happens in :func:`~apiface.policy.resolve_policy`, which turns these
    settings into an immutable :class:`GenerationPolicy`.

    Keys not declared here (renderer-only options such as
    ``generateContracts``) are preserved in ``model_extra``.

    Example::

        GenerationSettings.model_validate({
            "partitionStrategy": "ByTag",
            "includeTags": ["pets"],
            "operationNameTemplate": "{operationId}Async",
        })
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    namespace: str = "GeneratedCode"
    partition_strategy: PartitionStrategy = Field(
        default=PartitionStrategy.NONE,
        validation_alias=AliasChoices(
            "partitionStrategy", "multipleInterfaces", "partition_strategy"
        ),
        serialization_alias="partitionStrategy",
    )
    interface_base_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("interfaceBaseName", "interface_base_name"),
        serialization_alias="interfaceBaseName",
    )
    interface_prefix: str = Field(
        default="I",
        validation_alias=AliasChoices("interfacePrefix", "interface_prefix"),
        serialization_alias="interfacePrefix",
    )
    naming: NamingSettings = Field(default_factory=NamingSettings)
    operation_name_template: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "operationNameTemplate", "operation_name_template"
        ),
        serialization_alias="operationNameTemplate",
    )
    include_tags: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("includeTags", "include_tags"),
        serialization_alias="includeTags",
    )
    include_path_patterns: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "includePathPatterns", "includePathMatches", "include_path_patterns"
        ),
        serialization_alias="includePathPatterns",
    )
    include_deprecated: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "includeDeprecated", "generateDeprecatedOperations", "include_deprecated"
        ),
        serialization_alias="includeDeprecated",
    )
    optional_parameters_last: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "optionalParametersLast", "optionalParameters", "optional_parameters_last"
        ),
        serialization_alias="optionalParametersLast",
    )
    add_accept_headers: bool = Field(
        default=True,
        validation_alias=AliasChoices("addAcceptHeaders", "add_accept_headers"),
        serialization_alias="addAcceptHeaders",
    )
    use_cancellation_tokens: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "useCancellationTokens", "use_cancellation_tokens"
        ),
        serialization_alias="useCancellationTokens",
    )
    return_api_response: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "returnApiResponse", "returnIApiResponse", "return_api_response"
        ),
        serialization_alias="returnApiResponse",
    )
    generate_operation_headers: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "generateOperationHeaders", "generate_operation_headers"
        ),
        serialization_alias="generateOperationHeaders",
    )
    type_accessibility: TypeAccessibility = Field(
        default=TypeAccessibility.PUBLIC,
        validation_alias=AliasChoices("typeAccessibility", "type_accessibility"),
        serialization_alias="typeAccessibility",
    )
    additional_namespaces: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("additionalNamespaces", "additional_namespaces"),
        serialization_alias="additionalNamespaces",
    )
    dependency_injection: Optional[DependencyInjectionSettings] = Field(
        default=None,
        validation_alias=AliasChoices(
            "dependencyInjection", "dependencyInjectionSettings", "dependency_injection"
        ),
        serialization_alias="dependencyInjection",
    )

    @field_validator("partition_strategy", mode="before")
    @classmethod
    def _normalise_strategy(cls, value: Any) -> Any:
        if value is None:
            return PartitionStrategy.NONE
        if isinstance(value, str):
            key = value.replace("_", "").replace("-", "").lower()
            if key in _STRATEGY_SPELLINGS:
                return _STRATEGY_SPELLINGS[key]
        return value

    @field_validator("type_accessibility", mode="before")
    @classmethod
    def _lower_accessibility(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value


# --- Resolved policy ---


class Placeholder(str, enum.Enum):
    """The closed set of substitutions an operation-name template may use."""

    OPERATION_ID = "operationId"
    HTTP_METHOD = "httpMethod"
    LAST_PATH_SEGMENT = "lastPathSegment"
    TAG = "tag"


class TemplatePart(BaseModel):
    """One piece of a compiled template: a literal run or a placeholder."""

    model_config = ConfigDict(frozen=True)

    literal: str = ""
    placeholder: Optional[Placeholder] = None


class NameTemplate(BaseModel):
    """An operation-name template compiled by :func:`~apiface.policy.compile_template`."""

    model_config = ConfigDict(frozen=True)

    source: str
    parts: tuple[TemplatePart, ...]

    @property
    def placeholders(self) -> tuple[Placeholder, ...]:
        return tuple(p.placeholder for p in self.parts if p.placeholder is not None)


class DependencyInjectionPolicy(BaseModel):
    """Resolved DI/retry sub-policy consumed by the pipeline assembler.

    Range checks on the retry values belong to
    :func:`~apiface.generator.pipeline.assemble_wiring_plan`.
    """

    model_config = ConfigDict(frozen=True)

    base_url: Optional[str] = None
    handler_chain: tuple[str, ...] = ()
    use_retry: bool = False
    max_retry_attempts: int = 6
    first_backoff_seconds: float = 1.0


class GenerationPolicy(BaseModel):
    """The fully resolved, validated configuration for one generation run.

    Built once by :func:`~apiface.policy.resolve_policy` and read-only
    thereafter. Downstream stages receive it by reference; a policy must not
    be shared across concurrent runs over different API descriptions.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    partition_strategy: PartitionStrategy
    interface_prefix: str
    interface_base_name: str
    name_template: Optional[NameTemplate] = None
    include_tags: tuple[str, ...] = ()
    include_path_patterns: tuple[str, ...] = ()
    include_deprecated: bool = True
    optional_parameters_last: bool = False
    add_accept_headers: bool = True
    use_cancellation_tokens: bool = False
    return_api_response: bool = False
    generate_operation_headers: bool = True
    type_accessibility: TypeAccessibility = TypeAccessibility.PUBLIC
    additional_namespaces: tuple[str, ...] = ()
    dependency_injection: Optional[DependencyInjectionPolicy] = None


# --- Engine output ---


class MethodSignature(BaseModel):
    """One method of a generated client interface."""

    model_config = ConfigDict(frozen=True)

    name: str
    parameters: tuple[Parameter, ...]
    operation: Operation
    return_kind: ReturnKind = ReturnKind.RAW_PAYLOAD
    accept_headers: tuple[str, ...] = ()
    cancellable: bool = False


class InterfaceDefinition(BaseModel):
    """A named client interface holding an ordered set of methods.

    ``group_key`` is the tag (``ByTag``), the operation id (``ByEndpoint``)
    or ``None`` for the single interface and for the untagged bucket.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    group_key: Optional[str] = None
    methods: tuple[MethodSignature, ...] = ()
    accessibility: TypeAccessibility = TypeAccessibility.PUBLIC


class RetryPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_attempts: int
    base_backoff_seconds: float


class ClientWiringPlan(BaseModel):
    """Handler chain and retry parameters for the DI wiring renderer."""

    model_config = ConfigDict(frozen=True)

    handlers: tuple[str, ...] = ()
    retry: Optional[RetryPolicy] = None
    base_url: Optional[str] = None


class GenerationResult(BaseModel):
    """Everything one run hands to the renderer."""

    model_config = ConfigDict(frozen=True)

    policy: GenerationPolicy
    interfaces: tuple[InterfaceDefinition, ...] = ()
    wiring_plan: Optional[ClientWiringPlan] = None
