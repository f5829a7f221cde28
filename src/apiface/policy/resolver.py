"""Turn raw generation settings into an immutable :class:`~apiface.models.GenerationPolicy`.

:func:`resolve_policy` is the only way to obtain a policy. Construction and
validation are one step: either every field is defaulted, normalised, and
checked for consistency, or a :class:`~apiface.exceptions.PolicyError` is
raised and nothing downstream runs.

Checks performed, in order:

1. The raw mapping validates against :class:`~apiface.models.GenerationSettings`
   (types, enum spellings) -- ``InvalidSetting``.
2. Namespace, interface prefix, and interface base name are usable
   identifiers -- ``InvalidSetting``.
3. The operation-name template compiles -- ``UnknownPlaceholder`` -- and
   always yields a non-empty method name -- ``InvalidCombination``.
4. Include tags and include path patterns are non-empty strings and the
   patterns are valid globs -- ``InvalidSetting``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from apiface.exceptions import PolicyError, PolicyErrorKind
from apiface.identifiers import sanitize_identifier, to_pascal_case
from apiface.models import (
    DependencyInjectionPolicy,
    DependencyInjectionSettings,
    GenerationPolicy,
    GenerationSettings,
    NameTemplate,
)
from apiface.policy.patterns import check_path_patterns
from apiface.policy.templates import always_yields_name, compile_template

logger = logging.getLogger(__name__)

RawSettings = Union[GenerationSettings, Mapping[str, Any], None]


def resolve_policy(
    raw_settings: RawSettings = None,
    api_title: Optional[str] = None,
) -> GenerationPolicy:
    """Merge *raw_settings* with defaults into a validated policy.

    Args:
        raw_settings: A :class:`~apiface.models.GenerationSettings`, a plain
            mapping in settings-file shape (camelCase or snake_case keys), or
            ``None`` for all defaults.
        api_title: Title of the API description. Used as the interface base
            name when ``naming.useOpenApiTitle`` is on and no explicit
            ``interfaceBaseName`` is set.

    Returns:
        The frozen :class:`~apiface.models.GenerationPolicy` for one run.

    Raises:
        PolicyError: If the settings are malformed or contradictory. The
            ``kind`` attribute tells which check failed.

    Example::

        policy = resolve_policy({"partitionStrategy": "ByTag"})
        policy.partition_strategy  # PartitionStrategy.BY_TAG
        policy.interface_base_name  # "ApiClient"
    """
    settings = _coerce_settings(raw_settings)

    namespace = settings.namespace.strip()
    if not namespace:
        raise PolicyError("Namespace must not be empty", PolicyErrorKind.INVALID_SETTING)

    prefix = settings.interface_prefix
    if sanitize_identifier(prefix) != prefix:
        raise PolicyError(
            f"Interface prefix '{prefix}' is not a valid identifier prefix",
            PolicyErrorKind.INVALID_SETTING,
        )

    policy = GenerationPolicy(
        namespace=namespace,
        partition_strategy=settings.partition_strategy,
        interface_prefix=prefix,
        interface_base_name=_resolve_base_name(settings, api_title),
        name_template=_resolve_template(settings.operation_name_template),
        include_tags=_unique_non_empty(settings.include_tags, "include tag"),
        include_path_patterns=_resolve_path_patterns(settings.include_path_patterns),
        include_deprecated=settings.include_deprecated,
        optional_parameters_last=settings.optional_parameters_last,
        add_accept_headers=settings.add_accept_headers,
        use_cancellation_tokens=settings.use_cancellation_tokens,
        return_api_response=settings.return_api_response,
        generate_operation_headers=settings.generate_operation_headers,
        type_accessibility=settings.type_accessibility,
        additional_namespaces=tuple(dict.fromkeys(settings.additional_namespaces)),
        dependency_injection=_resolve_dependency_injection(
            settings.dependency_injection
        ),
    )
    logger.debug(
        "Resolved policy: strategy=%s base=%s template=%s tags=%d patterns=%d",
        policy.partition_strategy.value,
        policy.interface_base_name,
        policy.name_template.source if policy.name_template else None,
        len(policy.include_tags),
        len(policy.include_path_patterns),
    )
    return policy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce_settings(raw_settings: RawSettings) -> GenerationSettings:
    if isinstance(raw_settings, GenerationSettings):
        return raw_settings
    try:
        return GenerationSettings.model_validate(dict(raw_settings or {}))
    except ValidationError as exc:
        raise PolicyError(
            f"Invalid generation settings: {exc}", PolicyErrorKind.INVALID_SETTING
        ) from exc


def _resolve_base_name(settings: GenerationSettings, api_title: Optional[str]) -> str:
    """Pick the interface base name: explicit > API title > ``naming.interfaceName``.

    Every source is PascalCased the same way, so ``"pet store"`` gives
    ``PetStore`` whichever setting it came from.
    """
    if settings.interface_base_name is not None:
        raw, origin = settings.interface_base_name, "interfaceBaseName"
    elif settings.naming.use_openapi_title and api_title and api_title.strip():
        raw, origin = api_title, "API title"
    else:
        raw, origin = settings.naming.interface_name, "naming.interfaceName"

    base = sanitize_identifier(to_pascal_case(raw))
    if not base:
        raise PolicyError(
            f"Interface base name from {origin} ('{raw}') is empty after normalisation",
            PolicyErrorKind.INVALID_SETTING,
        )
    return base


def _resolve_template(source: Optional[str]) -> Optional[NameTemplate]:
    if source is None:
        return None
    template = compile_template(source)
    if not always_yields_name(template):
        raise PolicyError(
            f"Operation name template '{source}' does not resolve to a non-empty "
            "method name for every operation; add literal text or an "
            "{operationId} / {httpMethod} placeholder",
            PolicyErrorKind.INVALID_COMBINATION,
        )
    return template


def _unique_non_empty(values: list[str], label: str) -> tuple[str, ...]:
    for value in values:
        if not value.strip():
            raise PolicyError(
                f"Empty {label} is not allowed", PolicyErrorKind.INVALID_SETTING
            )
    return tuple(dict.fromkeys(values))


def _resolve_path_patterns(patterns: list[str]) -> tuple[str, ...]:
    resolved = _unique_non_empty(patterns, "include path pattern")
    if resolved:
        check_path_patterns(resolved)
    return resolved


def _resolve_dependency_injection(
    settings: Optional[DependencyInjectionSettings],
) -> Optional[DependencyInjectionPolicy]:
    if settings is None:
        return None
    return DependencyInjectionPolicy(
        base_url=settings.base_url,
        handler_chain=tuple(settings.handler_chain),
        use_retry=settings.use_retry,
        max_retry_attempts=settings.max_retry_attempts,
        first_backoff_seconds=settings.first_backoff_seconds,
    )
