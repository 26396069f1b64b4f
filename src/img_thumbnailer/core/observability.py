"""Request-scoped log context and per-stage timings."""

import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional

from .logging_config import get_logger


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every log line of one thumbnail request."""

    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        return replace(self, operation=operation, metadata=dict(self.metadata))

    def with_metadata(self, **kwargs: Any) -> "LogContext":
        return replace(self, metadata={**self.metadata, **kwargs})


def render(message: str, context: Optional[LogContext] = None, **fields: Any) -> str:
    """Format ``message`` as ``[operation] [correlation id] message (k=v, ...)``."""
    prefix = ""
    if context is not None:
        prefix = f"[{context.correlation_id}] "
        if context.operation:
            prefix = f"[{context.operation}] {prefix}"
        fields = {**context.metadata, **fields}
    suffix = ""
    if fields:
        suffix = " (" + ", ".join(f"{key}={value}" for key, value in fields.items()) + ")"
    return f"{prefix}{message}{suffix}"


class StructuredLogger:
    """Logger taking an optional LogContext and extra ``key=value`` fields."""

    def __init__(self, name: str, level: Optional[int] = None):
        self._logger = get_logger(name)
        if level is not None:
            self._logger.setLevel(level)

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, context: Optional[LogContext] = None, **fields: Any):
        self._logger.debug(render(message, context, **fields))

    def info(self, message: str, context: Optional[LogContext] = None, **fields: Any):
        self._logger.info(render(message, context, **fields))

    def warning(self, message: str, context: Optional[LogContext] = None, **fields: Any):
        self._logger.warning(render(message, context, **fields))

    def error(self, message: str, context: Optional[LogContext] = None, **fields: Any):
        self._logger.error(render(message, context, **fields))


@dataclass
class StageTiming:
    """Elapsed time of one pipeline stage of one request."""

    stage: str
    started: float
    finished: float
    success: bool
    error: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.finished - self.started

    @property
    def duration_ms(self) -> float:
        return self.duration * 1000


class MetricsCollector:
    """Stage timings shared by all request threads."""

    def __init__(self):
        self._timings: List[StageTiming] = []
        self._lock = threading.Lock()

    def record(self, timing: StageTiming) -> None:
        with self._lock:
            self._timings.append(timing)

    def timings(self, stage: Optional[str] = None) -> List[StageTiming]:
        """Recorded timings, oldest first, optionally for one stage."""
        with self._lock:
            recorded = list(self._timings)
        if stage:
            return [timing for timing in recorded if timing.stage == stage]
        return recorded

    def summary(self, stage: Optional[str] = None) -> Dict[str, Any]:
        """
        Aggregate the recorded timings.

        ``busy_seconds`` for the ``resize`` stage is the time the engine
        gate was in use, since resizes never overlap.
        """
        recorded = self.timings(stage)
        if not recorded:
            return {}

        durations = [timing.duration for timing in recorded]
        failures = sum(1 for timing in recorded if not timing.success)
        return {
            "count": len(recorded),
            "failures": failures,
            "success_rate": (len(recorded) - failures) / len(recorded),
            "avg_seconds": sum(durations) / len(durations),
            "min_seconds": min(durations),
            "max_seconds": max(durations),
            "busy_seconds": sum(durations),
        }

    def clear(self) -> None:
        with self._lock:
            self._timings.clear()


@contextmanager
def timed_stage(
    stage: str,
    logger: Optional[Any] = None,
    collector: Optional[MetricsCollector] = None,
    context: Optional[LogContext] = None,
) -> Iterator[LogContext]:
    """
    Time the enclosed block as pipeline stage ``stage``.

    Logs the start at DEBUG, the outcome at INFO or ERROR with the elapsed
    milliseconds, and hands a StageTiming to ``collector``. Exceptions pass
    through unchanged.
    """
    stage_context = (context or LogContext()).with_operation(stage)
    if logger:
        logger.debug(f"Starting {stage}", stage_context)

    started = time.monotonic()
    success = False
    error = None
    try:
        yield stage_context
        success = True
    except Exception as exc:
        error = str(exc)
        raise
    finally:
        finished = time.monotonic()
        elapsed_ms = round((finished - started) * 1000, 1)
        if logger:
            if success:
                logger.info(f"Completed {stage}", stage_context, duration_ms=elapsed_ms)
            else:
                logger.error(
                    f"Failed {stage}: {error}", stage_context, duration_ms=elapsed_ms
                )
        if collector:
            collector.record(
                StageTiming(
                    stage=stage,
                    started=started,
                    finished=finished,
                    success=success,
                    error=error,
                )
            )
