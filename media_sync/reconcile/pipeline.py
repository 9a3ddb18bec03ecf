#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Bounded worker pool fed by a lazy stream of local files.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, Set

from tqdm import tqdm

from ..errors import RunCancelled
from ..models.local_file import LocalFile
from ..models.run_state import RunState

logger = logging.getLogger(__name__)


class WorkerPipeline:
    """
    One dispatcher pulls files from the source and hands them to N workers.

    At most 2*N files are in flight, so the source is read at the pace of the
    workers. run() returns only once the source is exhausted and every
    dispatched file has been handled.
    """

    def __init__(self, workers: int, state: RunState, show_progress: bool = False,
                 poll_interval: float = 0.1):
        self.workers = max(1, workers)
        self.state = state
        self.show_progress = show_progress
        self.poll_interval = poll_interval

    def _acquire(self, slots: threading.Semaphore):
        while not slots.acquire(timeout=self.poll_interval):
            if self.state.cancelled:
                raise RunCancelled("run cancelled")

    def run(self, items: Iterable[LocalFile], handler: Callable[[LocalFile], None]) -> int:
        """Handle every item, returns the number dispatched."""
        slots = threading.Semaphore(self.workers * 2)
        pending: Set[Future] = set()
        pending_lock = threading.Lock()
        dispatched = 0

        def done(fut: Future, item: LocalFile):
            with pending_lock:
                pending.discard(fut)
            if fut.cancelled():
                item.close()
            slots.release()

        with tqdm(desc="Media scanned", unit="file", disable=not self.show_progress) as bar, \
                ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="media-sync") as pool:

            def work(item: LocalFile):
                try:
                    if self.state.cancelled:
                        return
                    handler(item)
                except Exception as e:
                    self.state.incr("errors")
                    logger.error("%s: %r", e, item.file_name)
                finally:
                    item.close()
                    bar.update(1)

            try:
                for item in items:
                    if self.state.cancelled:
                        item.close()
                        raise RunCancelled("run cancelled")
                    try:
                        self._acquire(slots)
                    except RunCancelled:
                        item.close()
                        raise
                    fut = pool.submit(work, item)
                    with pending_lock:
                        pending.add(fut)
                    fut.add_done_callback(lambda f, it=item: done(f, it))
                    dispatched += 1
            except KeyboardInterrupt:
                self.state.cancel()
                self._cancel_pending(pending, pending_lock)
                raise RunCancelled("interrupted by user")
            except RunCancelled:
                self._cancel_pending(pending, pending_lock)
                raise
            finally:
                close = getattr(items, "close", None)
                if close is not None and self.state.cancelled:
                    close()

            logger.debug("Finished enqueueing %d asset items, waiting for workers...", dispatched)

        if self.state.cancelled:
            raise RunCancelled("run cancelled")
        return dispatched

    def _cancel_pending(self, pending: Set[Future], lock: threading.Lock):
        with lock:
            queued = list(pending)
        cancelled = sum(1 for f in queued if f.cancel())
        logger.warning("Run cancelled, %d queued file(s) dropped", cancelled)
