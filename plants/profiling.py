"""
Opt-in timing of the generation and per-frame stages (generate, flatten, composite, draw).
"""

import time
from dataclasses import dataclass
from functools import wraps
from typing import Dict, List, Tuple


@dataclass
class StageTiming:
    calls: int = 0
    total_time: float = 0.0
    worst_time: float = 0.0    # slowest single call, usually the fully grown frame

    def add(self, elapsed: float):
        self.calls += 1
        self.total_time += elapsed
        self.worst_time = max(self.worst_time, elapsed)

    @property
    def average_ms(self) -> float:
        return self.total_time / self.calls * 1000 if self.calls else 0.0


class Profiler:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self.stages: Dict[str, StageTiming] = {}
        self.enabled = False

    def record(self, stage: str, elapsed: float):
        if not self.enabled:
            return
        self.stages.setdefault(stage, StageTiming()).add(elapsed)

    def rows(self) -> List[Tuple[str, int, float, float, float]]:
        """(stage, calls, total seconds, average ms, worst ms), slowest stage first."""
        ordered = sorted(self.stages.items(), key=lambda item: item[1].total_time, reverse=True)
        return [
            (stage, t.calls, t.total_time, t.average_ms, t.worst_time * 1000)
            for stage, t in ordered
        ]

    def print_stats(self):
        if not self.stages:
            return

        print("\n" + "=" * 80)
        print("STAGE TIMINGS")
        print("=" * 80)
        print(f"{'Stage':<35} {'Calls':>9} {'Total(s)':>10} {'Avg(ms)':>11} {'Worst(ms)':>11}")
        print("-" * 80)
        for stage, calls, total, avg_ms, worst_ms in self.rows():
            print(f"{stage:<35} {calls:>9} {total:>10.3f} {avg_ms:>11.3f} {worst_ms:>11.3f}")
        print("=" * 80)

    def reset(self):
        self.stages.clear()


profiler = Profiler()


def profile(func):
    """Time every call of `func` under its qualified name while the profiler is enabled."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not profiler.enabled:
            return func(*args, **kwargs)
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            profiler.record(func.__qualname__, time.perf_counter() - start)
    return wrapper


class profile_block:
    """Time a named block, e.g. the Cairo drawing of one frame."""

    def __init__(self, stage: str):
        self.stage = stage
        self.start = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        profiler.record(self.stage, time.perf_counter() - self.start)
