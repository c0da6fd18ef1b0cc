"""Observability helpers for instrumenting pipeline stages and generator calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from stylist_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _result_size(result: object) -> int | None:
    items = getattr(result, "items", None)
    if isinstance(items, list):
        return len(items)
    outfits = getattr(result, "outfits", None)
    if isinstance(outfits, list):
        return len(outfits)
    if isinstance(result, (list, tuple, str)):
        return len(result)
    return None


def instrument_stage(stage_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a callable to emit structured start/finish logs with durations."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.DEBUG,
                "stage_started",
                stage=stage_name,
                correlation_id=correlation_id,
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "stage_failed",
                    stage=stage_name,
                    correlation_id=correlation_id,
                    duration_ms=duration_ms,
                    exc_info=True,
                )
                raise
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            log_event(
                LOGGER,
                logging.INFO,
                "stage_completed",
                stage=stage_name,
                correlation_id=correlation_id,
                duration_ms=duration_ms,
                result_size=_result_size(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_stage"]
