"""Derive the client wiring plan (handler chain + retry parameters).

The wiring plan feeds the renderer that emits dependency-injection and retry
boilerplate. It is independent of operations and interfaces: it only reads
the DI sub-policy, so it can be assembled before, after, or alongside the
partitioning stages.
"""

from __future__ import annotations

import math
from typing import Optional

from apiface.exceptions import InvalidRetryConfiguration
from apiface.models import ClientWiringPlan, DependencyInjectionPolicy, RetryPolicy


def assemble_wiring_plan(
    di_policy: Optional[DependencyInjectionPolicy],
) -> Optional[ClientWiringPlan]:
    """Build a :class:`~apiface.models.ClientWiringPlan` from the DI sub-policy.

    The handler chain is passed through exactly as declared: no reordering
    and no de-duplication. Retry values are range-checked even when retries
    are disabled; ``retry`` on the plan is ``None`` in that case.

    Args:
        di_policy: ``policy.dependency_injection``; ``None`` disables wiring.

    Returns:
        The wiring plan, or ``None`` if there is no DI sub-policy.

    Raises:
        InvalidRetryConfiguration: If ``max_retry_attempts`` is below 1 or
            ``first_backoff_seconds`` is not a positive finite number.
    """
    if di_policy is None:
        return None

    if di_policy.max_retry_attempts < 1:
        raise InvalidRetryConfiguration(
            f"maxRetryAttempts must be >= 1, got {di_policy.max_retry_attempts}"
        )
    backoff = di_policy.first_backoff_seconds
    if not math.isfinite(backoff) or backoff <= 0:
        raise InvalidRetryConfiguration(
            f"firstBackoffSeconds must be > 0, got {backoff}"
        )

    retry = None
    if di_policy.use_retry:
        retry = RetryPolicy(
            max_attempts=di_policy.max_retry_attempts,
            base_backoff_seconds=backoff,
        )
    return ClientWiringPlan(
        handlers=di_policy.handler_chain,
        retry=retry,
        base_url=di_policy.base_url,
    )
