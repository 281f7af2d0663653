"""Wall-clock timing of code blocks."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class Timing:
    """Result of a timed block; ``elapsed`` is in seconds."""

    label: str
    elapsed: float = 0.0


@contextmanager
def tick(label: str) -> Iterator[Timing]:
    """Time the enclosed block and print ``label: <seconds>s`` when it ends."""
    timing = Timing(label)
    start = time.perf_counter()
    yield timing
    timing.elapsed = time.perf_counter() - start
    print(f"{label}: {timing.elapsed:f}s")