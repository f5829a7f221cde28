"""Policy resolution -- validate raw settings into an immutable policy.

This sub-package is the first stage of the apiface pipeline: every run
starts by turning user settings into a
:class:`~apiface.models.GenerationPolicy`. Nothing else in the engine reads
raw settings.

Typical usage::

    from apiface.policy import resolve_policy

    policy = resolve_policy({"partitionStrategy": "ByTag"}, api_title="Petstore")

Sub-modules:

* :mod:`~apiface.policy.resolver` -- defaults, normalisation, and
  cross-field validation.
* :mod:`~apiface.policy.templates` -- compile and expand operation-name
  templates.
* :mod:`~apiface.policy.patterns` -- glob include path patterns.
"""

from apiface.policy.resolver import resolve_policy
from apiface.policy.templates import compile_template

__all__ = ["resolve_policy", "compile_template"]
