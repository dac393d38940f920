"""
Per-rule timing for the grammar, selected once at import.

Setting `JSONTREE_PROFILE` in the environment (and not running under -O)
makes every `ProfileContext` block record into a table keyed by rule name.
Otherwise `ProfileContext` is an empty context manager. Callers reach it as
`_profiling.ProfileContext` so that re-importing this module switches every
rule over.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

PROFILE_ENV_VAR = "JSONTREE_PROFILE"

PROFILE_HOT_PATHS = __debug__ and PROFILE_ENV_VAR in os.environ


@dataclass
class HotPathStats:
    """Accumulated timings for one grammar rule."""

    rule: str
    call_count: int = 0
    total_time_ns: int = 0
    bytes_processed: int = 0

    def record_call(self, duration_ns: int, nbytes: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.bytes_processed += nbytes

    @property
    def mean_time_ns(self) -> float:
        if not self.call_count:
            return 0.0
        return self.total_time_ns / self.call_count


_hot_path_stats: dict[str, HotPathStats] = {}


def get_hot_path_stats() -> dict[str, HotPathStats]:
    """Returns a snapshot of the per-rule table, empty when disabled."""
    return dict(_hot_path_stats)


def clear_hot_path_stats() -> None:
    _hot_path_stats.clear()


def log_hot_path_stats(level: int = logging.DEBUG) -> None:
    """Logs one line per rule, slowest total first."""
    ranked = sorted(
        _hot_path_stats.values(), key=lambda s: s.total_time_ns, reverse=True
    )
    for stats in ranked:
        logger.log(
            level,
            "%-12s calls=%d total=%dns mean=%.0fns bytes=%d",
            stats.rule,
            stats.call_count,
            stats.total_time_ns,
            stats.mean_time_ns,
            stats.bytes_processed,
        )


if PROFILE_HOT_PATHS:

    class ProfileContext:
        """Times the enclosed block and charges it to `rule`."""

        __slots__ = ("rule", "nbytes", "start_ns")

        def __init__(self, rule: str, nbytes: int = 0) -> None:
            self.rule = rule
            self.nbytes = nbytes
            self.start_ns = 0

        def __enter__(self) -> "ProfileContext":
            self.start_ns = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            elapsed = time.perf_counter_ns() - self.start_ns
            stats = _hot_path_stats.get(self.rule)
            if stats is None:
                stats = _hot_path_stats[self.rule] = HotPathStats(self.rule)
            stats.record_call(elapsed, self.nbytes)

else:

    class ProfileContext:  # type: ignore[no-redef]
        __slots__ = ()

        def __init__(self, rule: str, nbytes: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass
