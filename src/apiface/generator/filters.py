"""Select the operations eligible for generation.

:func:`filter_operations` applies three independent rules from the
:class:`~apiface.models.GenerationPolicy`. An operation survives only if it
passes every rule that is active:

1. **Deprecation** -- deprecated operations are dropped when
   ``include_deprecated`` is off.
2. **Tags** -- with a non-empty ``include_tags``, at least one of the
   operation's tags must be in the set.
3. **Paths** -- with non-empty ``include_path_patterns``, the path must match
   at least one pattern (see :mod:`apiface.policy.patterns`).

The filter is stable: survivors keep their original relative order, which
later becomes the emission order of interfaces and methods. An empty result
is a valid outcome, not an error.
"""

from __future__ import annotations

import logging
from typing import Iterable

from apiface.models import GenerationPolicy, Operation
from apiface.policy.patterns import path_matches

logger = logging.getLogger(__name__)


def filter_operations(
    operations: Iterable[Operation], policy: GenerationPolicy
) -> list[Operation]:
    """Return the operations that pass every active filter, in input order.

    Args:
        operations: Normalized operations in their original order.
        policy: The resolved policy.

    Returns:
        A new list holding the surviving operations (the same objects, not
        copies). May be empty.

    Example::

        # op1(tag X), op2(tag Y, deprecated), op3(tag X), include_deprecated=False
        filter_operations([op1, op2, op3], policy)  # -> [op1, op3]
    """
    include_tags = set(policy.include_tags)
    result: list[Operation] = []
    for operation in operations:
        reason = _rejection_reason(operation, policy, include_tags)
        if reason is not None:
            logger.debug("Skipping operation '%s': %s", operation.id, reason)
            continue
        result.append(operation)
    return result


def _rejection_reason(
    operation: Operation, policy: GenerationPolicy, include_tags: set[str]
) -> str | None:
    """Return why *operation* is filtered out, or ``None`` if it is kept."""
    if operation.deprecated and not policy.include_deprecated:
        return "deprecated"
    if include_tags and include_tags.isdisjoint(operation.tags):
        return "no included tag"
    if policy.include_path_patterns and not path_matches(
        operation.path, policy.include_path_patterns
    ):
        return "path not included"
    return None
