from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from app.core.errors import StageFailed
from app.logging_utils import get_logger
from app.metrics import STAGE_DEGRADED, track_stage

log = get_logger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")


@dataclass(frozen=True)
class Stage(Generic[In, Out]):
    """
    One step of the ingestion pipeline.

    A stage without a ``fallback`` is fatal: any exception from ``run`` is
    re-raised as ``failure`` (default StageFailed). A stage with a fallback
    is best-effort: the exception is logged and ``fallback(value)`` is
    returned instead. ``degraded(result)`` flags a result that came back
    without an exception but still carries defaults.
    """

    name: str
    run: Callable[[In], Awaitable[Out]]
    fallback: Callable[[In], Out] | None = None
    failure: Callable[[], StageFailed] | None = None
    degraded: Callable[[Out], bool] | None = None

    @property
    def fatal(self) -> bool:
        return self.fallback is None


def _mark_degraded(stage: Stage, extra: dict, reason: str) -> None:
    log.warning("stage degraded, using fallback", extra={**extra, "reason": reason})
    STAGE_DEGRADED.inc({"stage": stage.name})


async def run_stage(stage: Stage[In, Out], value: In, **log_extra) -> Out:
    extra = {"stage": stage.name, **log_extra}
    log.info("stage started", extra=extra)
    with track_stage(stage.name):
        try:
            result = await stage.run(value)
        except Exception as exc:
            if stage.fallback is None:
                log.error("stage failed", extra=extra, exc_info=exc)
                err = stage.failure() if stage.failure else StageFailed(stage.name)
                raise err from exc
            _mark_degraded(stage, extra, type(exc).__name__)
            return stage.fallback(value)
    if stage.degraded is not None and stage.degraded(result):
        _mark_degraded(stage, extra, "partial result")
        return result
    log.info("stage finished", extra=extra)
    return result
