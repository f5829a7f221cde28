"""Group filtered operations into named client interfaces.

This is the core algorithm of apiface. It takes the filtered operation
sequence and produces the ordered list of
:class:`~apiface.models.InterfaceDefinition` objects handed to the renderer.

**Algorithm summary**

1. Bucket operations according to the partition strategy:

   * ``None`` -- one bucket holding every operation.
   * ``ByEndpoint`` -- one bucket per operation, keyed by operation id.
   * ``ByTag`` -- one bucket per participating tag in first-seen order.
     Multi-tag operations are replicated into every matching bucket;
     untagged operations go to a reserved bucket emitted last.

2. Name each bucket with :func:`~apiface.generator.naming.resolve_interface_name`
   and each (bucket, operation) pair with
   :func:`~apiface.generator.naming.build_method_signature`.

3. Enforce uniqueness: method names within an interface, and interface names
   within the run. A clash raises
   :class:`~apiface.exceptions.NamingCollisionError` and no definitions are
   returned.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from apiface.exceptions import NamingCollisionError
from apiface.generator.naming import build_method_signature, resolve_interface_name
from apiface.models import (
    GenerationPolicy,
    InterfaceDefinition,
    MethodSignature,
    Operation,
    PartitionStrategy,
)

logger = logging.getLogger(__name__)

# (group key, tag used for {tag} expansion, operations in emission order)
_Bucket = tuple[Optional[str], Optional[str], list[Operation]]


def partition_operations(
    operations: Sequence[Operation], policy: GenerationPolicy
) -> list[InterfaceDefinition]:
    """Partition *operations* into interface definitions.

    Args:
        operations: Filtered operations, in emission order (the output of
            :func:`~apiface.generator.filters.filter_operations`).
        policy: The resolved policy.

    Returns:
        The interface definitions in emission order. Empty when
        *operations* is empty, whatever the strategy.

    Raises:
        NamingCollisionError: If two methods of one interface, or two
            interfaces, resolve to the same name.

    Example::

        policy = resolve_policy({"partitionStrategy": "ByTag"})
        interfaces = partition_operations(filtered, policy)
        [i.name for i in interfaces]  # ["IApiClientPets", "IApiClientStore"]
    """
    buckets = _bucket_operations(operations, policy)

    interfaces: list[InterfaceDefinition] = []
    claimed_interfaces: dict[str, str] = {}
    for group_key, group_tag, members in buckets:
        name = resolve_interface_name(group_key, policy)
        first_id = members[0].id
        if name in claimed_interfaces:
            raise NamingCollisionError(name, claimed_interfaces[name], first_id)
        claimed_interfaces[name] = first_id

        methods = [build_method_signature(op, policy, group_tag) for op in members]
        _ensure_unique_methods(name, methods)
        interfaces.append(
            InterfaceDefinition(
                name=name,
                group_key=group_key,
                methods=tuple(methods),
                accessibility=policy.type_accessibility,
            )
        )

    logger.info(
        "Partitioned %d operation(s) into %d interface(s) using strategy %s",
        len(operations),
        len(interfaces),
        policy.partition_strategy.value,
    )
    return interfaces


# ---------------------------------------------------------------------------
# Bucketing
# ---------------------------------------------------------------------------


def _bucket_operations(
    operations: Sequence[Operation], policy: GenerationPolicy
) -> list[_Bucket]:
    strategy = policy.partition_strategy
    if not operations:
        return []
    if strategy == PartitionStrategy.NONE:
        return [(None, None, list(operations))]
    if strategy == PartitionStrategy.BY_ENDPOINT:
        return [(op.id, None, [op]) for op in operations]
    if strategy == PartitionStrategy.BY_TAG:
        return _bucket_by_tag(operations, policy)
    raise ValueError(f"Unhandled partition strategy: {strategy!r}")


def _bucket_by_tag(
    operations: Sequence[Operation], policy: GenerationPolicy
) -> list[_Bucket]:
    """Bucket by tag in first-seen order, untagged bucket last.

    A non-empty ``include_tags`` limits which tags get a bucket: an operation
    tagged ``{A, B}`` with ``include_tags={A}`` only lands in ``A``.
    """
    include_tags = set(policy.include_tags)
    by_tag: dict[str, list[Operation]] = {}
    untagged: list[Operation] = []

    for operation in operations:
        if not operation.tags:
            untagged.append(operation)
            continue
        participating = [
            t for t in operation.tags if not include_tags or t in include_tags
        ]
        if not participating:
            logger.debug(
                "Operation '%s' has no participating tag, skipping", operation.id
            )
            continue
        for tag in participating:
            by_tag.setdefault(tag, []).append(operation)

    buckets: list[_Bucket] = [(tag, tag, ops) for tag, ops in by_tag.items()]
    if untagged:
        buckets.append((None, None, untagged))

    for tag in policy.include_tags:
        if tag not in by_tag:
            logger.info("Included tag '%s' matched no operations", tag)
    return buckets


# ---------------------------------------------------------------------------
# Uniqueness
# ---------------------------------------------------------------------------


def _ensure_unique_methods(interface_name: str, methods: list[MethodSignature]) -> None:
    """Raise :class:`NamingCollisionError` on the first duplicate method name."""
    claimed: dict[str, str] = {}
    for method in methods:
        existing = claimed.get(method.name)
        if existing is not None:
            raise NamingCollisionError(
                method.name,
                existing,
                method.operation.id,
                interface_name=interface_name,
            )
        claimed[method.name] = method.operation.id
