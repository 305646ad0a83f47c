"""
Compensating transaction steps.

A step is an action plus an optional compensator. When a later step fails,
compensators of the steps that succeeded run in reverse order.

    from quickshop.checkout import _transaction as T

    tx = T.step(claim, compensate=release).then(lambda c: T.from_async(write, on_error=...))
    result = await T.run_chain(tx)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog
from combinators import lift as L
from kungfu import Result, Ok, Error, LazyCoroResult

logger = structlog.get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Types
# ═══════════════════════════════════════════════════════════════════════════════

type Compensator[T] = Callable[[T], Awaitable[None]]
"""Receives the action's value and undoes it."""


@dataclass(frozen=True, slots=True)
class Step[T, E]:
    action: LazyCoroResult[T, E]
    compensate: Compensator[T] | None

    def then[U, E2](self, f: Callable[[T], Step[U, E2]]) -> Then[T, U, E, E2]:
        return Then(self, f)


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """Sequential composition: f builds the second step from the first's value."""

    inner: Step[T, E]
    f: Callable[[T], Step[U, E2]]


@dataclass(frozen=True, slots=True)
class Completed[T]:
    value: T
    steps_executed: int


@dataclass(frozen=True, slots=True)
class TransactionFailure[E]:
    """
    error: what the failing step reported
    step_failed: 1-based index of that step
    rollback_complete: every recorded compensator ran without raising
    """

    error: E
    step_failed: int
    compensators_run: int
    compensators_failed: int

    @property
    def rollback_complete(self) -> bool:
        return self.compensators_failed == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: Compensator[T] | None = None,
) -> Step[T, E]:
    return Step(action=action, compensate=compensate)


def from_async[T, E](
    action: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    compensate: Compensator[T] | None = None,
) -> Step[T, E]:
    """Step from an async callable; exceptions become Error(on_error(exc))."""
    return Step(
        action=L.catching_async(action, on_error=on_error),
        compensate=compensate,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Execution
# ═══════════════════════════════════════════════════════════════════════════════

type _Recorded = list[tuple[int, object, Compensator]]


async def _run_step[T, E](index: int, s: Step[T, E], recorded: _Recorded) -> Result[T, E]:
    result = await s.action
    match result:
        case Ok(value):
            if s.compensate is not None:
                recorded.append((index, value, s.compensate))
            return Ok(value)
        case Error(e):
            return Error(e)


async def _compensate(recorded: _Recorded) -> tuple[int, int]:
    """Run compensators in reverse. Returns (run, failed)."""
    run = failed = 0
    for index, value, comp in reversed(recorded):
        try:
            await comp(value)
            run += 1
        except Exception:
            failed += 1
            logger.exception("compensation_failed", step=index)
    return run, failed


async def run_chain[T, U, E, E2](
    chain: Then[T, U, E, E2],
) -> Result[Completed[U], TransactionFailure[E | E2]]:
    recorded: _Recorded = []

    match await _run_step(1, chain.inner, recorded):
        case Ok(value):
            match await _run_step(2, chain.f(value), recorded):
                case Ok(final):
                    return Ok(Completed(value=final, steps_executed=2))
                case Error(e):
                    run, failed = await _compensate(recorded)
                    logger.info(
                        "transaction_rolled_back",
                        step_failed=2,
                        compensators_run=run,
                        compensators_failed=failed,
                    )
                    return Error(TransactionFailure(e, 2, run, failed))

        case Error(e):
            run, failed = await _compensate(recorded)
            return Error(TransactionFailure(e, 1, run, failed))


__all__ = (
    "Compensator",
    "Step",
    "Then",
    "Completed",
    "TransactionFailure",
    "step",
    "from_async",
    "run_chain",
)
