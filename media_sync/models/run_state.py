#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Run-scoped state shared by the pipeline and the flush phases.
"""

import threading
from collections import Counter
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass
class FlushFailure:
    """A deferred operation that failed during the flush phase."""
    phase: str  # 'stack', 'album', 'delete-remote', 'delete-local'
    target: str
    error: str


@dataclass
class RunReport:
    """Outcome of one run, returned to the caller."""
    scanned: int = 0
    uploaded: int = 0
    skipped: int = 0
    errors: int = 0
    advice: Dict[str, int] = field(default_factory=dict)
    failures: List[FlushFailure] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RunState:
    """
    Counters, failures and the cancellation signal for a single run.

    A new instance is created for every run, nothing survives across runs.
    """

    def __init__(self, cancel_event: Optional[threading.Event] = None):
        self.cancel_event = cancel_event or threading.Event()
        self._lock = threading.Lock()
        self._counts: Counter = Counter()
        self._advice: Counter = Counter()
        self._failures: List[FlushFailure] = []

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self):
        self.cancel_event.set()

    def incr(self, counter: str, n: int = 1) -> int:
        with self._lock:
            self._counts[counter] += n
            return self._counts[counter]

    def count(self, counter: str) -> int:
        with self._lock:
            return self._counts[counter]

    def record_advice(self, code):
        with self._lock:
            self._advice[str(code)] += 1

    def add_failure(self, phase: str, target: str, error):
        with self._lock:
            self._failures.append(FlushFailure(phase=phase, target=target, error=str(error)))

    @property
    def failures(self) -> List[FlushFailure]:
        with self._lock:
            return list(self._failures)

    def report(self) -> RunReport:
        with self._lock:
            return RunReport(
                scanned=self._counts["scanned"],
                uploaded=self._counts["uploaded"],
                skipped=self._counts["skipped"],
                errors=self._counts["errors"],
                advice=dict(self._advice),
                failures=list(self._failures),
            )
