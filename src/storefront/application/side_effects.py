"""Best-effort follow-ups that run after an order is already durable.

A failure here is logged for out-of-band handling and never propagates:
undoing a committed order is not an option.
"""

from __future__ import annotations

from typing import Callable

import structlog

logger = structlog.get_logger(component="side_effects")


def run_best_effort(action: Callable[[], object], event: str, attempts: int = 1, **context) -> bool:
    """Run ``action`` up to ``attempts`` times. Only retry idempotent actions."""
    for attempt in range(1, attempts + 1):
        try:
            action()
            return True
        except Exception as exc:
            logger.warning(
                f"{event}_failed",
                attempt=attempt,
                attempts=attempts,
                error=str(exc),
                **context,
            )
    logger.error(f"{event}_abandoned", attempts=attempts, **context)
    return False
