"""Interface generator -- filter, name, and partition operations.

This sub-package is the second half of the apiface pipeline: taking the
normalized :class:`~apiface.models.Operation` records and a resolved
:class:`~apiface.models.GenerationPolicy`, and deciding which client
interfaces exist, which methods they hold, and what everything is called.

Typical usage::

    from apiface.generator import filter_operations, partition_operations
    from apiface.policy import resolve_policy

    policy = resolve_policy({"partitionStrategy": "ByTag"})
    interfaces = partition_operations(filter_operations(operations, policy), policy)

Sub-modules:

* :mod:`~apiface.generator.filters` -- stable tag/path/deprecation filter.
* :mod:`~apiface.generator.naming` -- method names, parameter order, and
  interface names.
* :mod:`~apiface.generator.partitioner` -- bucketing by strategy and
  uniqueness enforcement.
* :mod:`~apiface.generator.pipeline` -- handler chain and retry plan for
  the DI renderer.
"""

from apiface.generator.filters import filter_operations
from apiface.generator.partitioner import partition_operations
from apiface.generator.pipeline import assemble_wiring_plan

__all__ = ["filter_operations", "partition_operations", "assemble_wiring_plan"]
