"""Ordered multi-step operations across the blob and category stores.

A saga is a fixed list of steps run strictly in order. Every step is
idempotent (set union, set difference, overwrite, delete). There is no
compensation: when a step fails the saga stops there, the error is
re-raised unchanged and the steps that already ran stay applied.
Re-running the whole saga after a failure is safe.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, final

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class SagaStep:
    """Single named step of a saga."""

    name: str
    action: Callable[[], Any]


def run_saga(name: str, steps: Sequence[SagaStep]) -> list[str]:
    """Run saga steps in order, stopping at the first failure.

    Args:
        name: Saga name used in log messages.
        steps: Steps to run.

    Returns:
        Names of the completed steps (all of them).

    Raises:
        Exception: Whatever the failing step raised.
    """
    completed: list[str] = []
    for step in steps:
        logger.debug('Saga %s: running step %s', name, step.name)
        try:
            step.action()
        except Exception:
            logger.exception(
                'Saga %s stopped at step %s, completed: %s',
                name,
                step.name,
                ', '.join(completed) or 'none',
            )
            raise
        completed.append(step.name)

    logger.info('Saga %s completed: %s', name, ', '.join(completed))
    return completed
