"""Run one complete generation pass.

:func:`generate` wires the stages together in a fixed order:

1. :func:`~apiface.policy.resolve_policy` -- settings to policy.
2. :func:`~apiface.generator.assemble_wiring_plan` -- handler chain and
   retry plan, checked up front so bad retry values fail before any
   operation is touched.
3. :func:`~apiface.generator.filter_operations` -- select operations.
4. :func:`~apiface.generator.partition_operations` -- group and name them.

Any error aborts the run; a partial result is never returned. The same
``(operations, raw_settings, api_title)`` input always produces an equal
:class:`~apiface.models.GenerationResult`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from apiface.generator import (
    assemble_wiring_plan,
    filter_operations,
    partition_operations,
)
from apiface.models import GenerationResult, Operation
from apiface.policy import resolve_policy
from apiface.policy.resolver import RawSettings

logger = logging.getLogger(__name__)


def generate(
    operations: Iterable[Operation],
    raw_settings: RawSettings = None,
    api_title: Optional[str] = None,
) -> GenerationResult:
    """Produce the interface definitions and wiring plan for one API description.

    Args:
        operations: Normalized operations in document order.
        raw_settings: Settings mapping or
            :class:`~apiface.models.GenerationSettings`; ``None`` for defaults.
        api_title: Optional API title, see
            :func:`~apiface.policy.resolve_policy`.

    Returns:
        A :class:`~apiface.models.GenerationResult`. ``interfaces`` is empty
        when no operation survives filtering.

    Raises:
        PolicyError: Invalid or contradictory settings.
        InvalidRetryConfiguration: Out-of-range retry settings.
        NamingCollisionError: Two operations resolve to the same name.

    Example::

        op_set = load_operations("operations.yaml")
        result = generate(op_set.operations, load_settings("apiface.json"),
                          api_title=op_set.title)
        for interface in result.interfaces:
            print(interface.name, [m.name for m in interface.methods])
    """
    policy = resolve_policy(raw_settings, api_title=api_title)
    wiring_plan = assemble_wiring_plan(policy.dependency_injection)

    operations = list(operations)
    filtered = filter_operations(operations, policy)
    if not filtered:
        logger.warning(
            "No operations left after filtering %d operation(s); "
            "no interfaces will be generated",
            len(operations),
        )
    else:
        logger.debug(
            "%d of %d operation(s) passed filtering", len(filtered), len(operations)
        )

    interfaces = partition_operations(filtered, policy)
    return GenerationResult(
        policy=policy,
        interfaces=tuple(interfaces),
        wiring_plan=wiring_plan,
    )
