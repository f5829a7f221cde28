"""Resolve interface names, method names, and parameter order.

This module holds the naming decisions for a single operation, given a
:class:`~apiface.models.GenerationPolicy`:

* :func:`resolve_method_name` -- expand the operation-name template, or
  derive the name from the operation id.
* :func:`resolve_parameter_order` -- the parameter sequence of the generated
  method (header suppression, then optional-parameters-last).
* :func:`resolve_interface_name` -- the interface name for a partition
  bucket.
* :func:`build_method_signature` -- pack the above into a
  :class:`~apiface.models.MethodSignature`.

Names are normalised with :func:`~apiface.identifiers.to_pascal_case` and
:func:`~apiface.identifiers.sanitize_identifier` so the renderer always receives valid
identifiers. Uniqueness is *not* checked here; the partitioner enforces it
per interface once all names in a bucket are known.
"""

from __future__ import annotations

from typing import Optional

from apiface.identifiers import sanitize_identifier, to_pascal_case
from apiface.models import (
    GenerationPolicy,
    MethodSignature,
    Operation,
    Parameter,
    ParameterLocation,
    PartitionStrategy,
    Placeholder,
    ReturnKind,
)
from apiface.policy.templates import expand_template

EXECUTE_METHOD_NAME = "Execute"
"""Method name used under ``ByEndpoint`` when no template is configured."""

UNTAGGED_SUFFIX = "Untagged"
ENDPOINT_SUFFIX = "Endpoint"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def last_path_segment(path: str) -> str:
    """Return the final segment of *path* with any ``{}`` braces removed.

    ``"/pets/{petId}"`` -> ``"petId"``, ``"/"`` -> ``""``.
    """
    segments = [s for s in path.split("/") if s]
    if not segments:
        return ""
    return segments[-1].strip("{}")


def _fallback_method_name(operation: Operation) -> str:
    """Build a name from the HTTP method and static path segments."""
    static = [
        s for s in operation.path.split("/") if s and not s.startswith("{")
    ]
    return sanitize_identifier(
        to_pascal_case(operation.method.value) + to_pascal_case(" ".join(static))
    )


# ---------------------------------------------------------------------------
# Method names
# ---------------------------------------------------------------------------


def resolve_method_name(
    operation: Operation,
    policy: GenerationPolicy,
    group_tag: Optional[str] = None,
) -> str:
    """Compute the method name for *operation* within one interface.

    With an operation-name template, each placeholder value is PascalCased
    and substituted, and the result is sanitised into an identifier. Without
    a template the name is the PascalCased operation id, except under
    ``ByEndpoint`` where every interface has a single method named
    :data:`EXECUTE_METHOD_NAME`.

    Args:
        operation: The operation being named.
        policy: The resolved policy.
        group_tag: The tag of the interface being built under ``ByTag``.
            ``{tag}`` expands to it, or to the operation's primary tag when
            not given.

    Returns:
        A non-empty identifier.

    Example::

        # template "{httpMethod}{lastPathSegment}", GET /pets/{petId}
        resolve_method_name(op, policy)  # -> "GetPetId"
    """
    template = policy.name_template
    if template is not None:
        tag = group_tag if group_tag is not None else operation.primary_tag
        values = {
            Placeholder.OPERATION_ID: to_pascal_case(operation.id),
            Placeholder.HTTP_METHOD: to_pascal_case(operation.method.value),
            Placeholder.LAST_PATH_SEGMENT: to_pascal_case(
                last_path_segment(operation.path)
            ),
            Placeholder.TAG: to_pascal_case(tag or ""),
        }
        name = sanitize_identifier(expand_template(template, values))
    elif policy.partition_strategy == PartitionStrategy.BY_ENDPOINT:
        name = EXECUTE_METHOD_NAME
    else:
        name = sanitize_identifier(to_pascal_case(operation.id))

    return name or _fallback_method_name(operation)


# ---------------------------------------------------------------------------
# Parameter order
# ---------------------------------------------------------------------------


def resolve_parameter_order(
    operation: Operation, policy: GenerationPolicy
) -> tuple[Parameter, ...]:
    """Return the parameters of the generated method, in signature order.

    Header parameters are dropped when ``generate_operation_headers`` is
    off. With ``optional_parameters_last`` the remaining parameters are
    stably partitioned: every required parameter precedes every optional one,
    and each group keeps its original relative order.

    Example::

        # [req1, opt1, req2, opt2] -> (req1, req2, opt1, opt2)
    """
    params = list(operation.parameters)
    if not policy.generate_operation_headers:
        params = [p for p in params if p.location != ParameterLocation.HEADER]
    if policy.optional_parameters_last:
        params = [p for p in params if p.required] + [
            p for p in params if not p.required
        ]
    return tuple(params)


# ---------------------------------------------------------------------------
# Interface names
# ---------------------------------------------------------------------------


def resolve_interface_name(group_key: Optional[str], policy: GenerationPolicy) -> str:
    """Compute the interface name for a partition bucket.

    * ``None`` strategy: ``{prefix}{base}`` for the single interface.
    * ``ByTag``: ``{prefix}{base}{Tag}``; the untagged bucket (*group_key*
      ``None``) is ``{prefix}{base}Untagged``.
    * ``ByEndpoint``: ``{prefix}{OperationId}Endpoint``.

    Args:
        group_key: The tag (``ByTag``), the operation id (``ByEndpoint``), or
            ``None``.
        policy: The resolved policy.
    """
    prefix = policy.interface_prefix
    base = policy.interface_base_name
    strategy = policy.partition_strategy

    if strategy == PartitionStrategy.NONE:
        name = f"{prefix}{base}"
    elif strategy == PartitionStrategy.BY_TAG:
        suffix = UNTAGGED_SUFFIX if group_key is None else to_pascal_case(group_key)
        name = f"{prefix}{base}{suffix}"
    elif strategy == PartitionStrategy.BY_ENDPOINT:
        name = f"{prefix}{to_pascal_case(group_key or '')}{ENDPOINT_SUFFIX}"
    else:
        raise ValueError(f"Unhandled partition strategy: {strategy!r}")
    return sanitize_identifier(name)


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------


def build_method_signature(
    operation: Operation,
    policy: GenerationPolicy,
    group_tag: Optional[str] = None,
) -> MethodSignature:
    """Build the :class:`~apiface.models.MethodSignature` for one (interface, operation) pair."""
    return MethodSignature(
        name=resolve_method_name(operation, policy, group_tag),
        parameters=resolve_parameter_order(operation, policy),
        operation=operation,
        return_kind=(
            ReturnKind.WRAPPED_RESPONSE
            if policy.return_api_response
            else ReturnKind.RAW_PAYLOAD
        ),
        accept_headers=operation.produces if policy.add_accept_headers else (),
        cancellable=policy.use_cancellation_tokens,
    )
