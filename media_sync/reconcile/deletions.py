#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Server assets and local files to remove once everything else is done.
"""

import logging
from collections import deque
from typing import Callable, Deque, Generic, Hashable, Iterator, List, Optional, TypeVar

from ..errors import DeletionError
from ..models.local_file import LocalFile
from ..models.remote_asset import RemoteAsset
from ..models.run_state import RunState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrentList(Generic[T]):
    """Append-only list that many workers can push to at once."""

    def __init__(self):
        # deque.append is atomic under the GIL
        self._items: Deque[T] = deque()

    def push(self, item: T):
        self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def unique(self, key: Callable[[T], Hashable]) -> List[T]:
        """Snapshot with later duplicates of the same key dropped."""
        seen = set()
        out = []
        for item in list(self._items):
            k = key(item)
            if k in seen:
                continue
            seen.add(k)
            out.append(item)
        return out


class DeletionSets:
    """The two deferred removal lists."""

    def __init__(self):
        self.remote: ConcurrentList[RemoteAsset] = ConcurrentList()
        self.local: ConcurrentList[LocalFile] = ConcurrentList()

    def delete_server_assets(self, client, state: RunState, dry_run: bool = False) -> Optional[DeletionError]:
        """
        Remove the superseded server assets with a single request.

        Returns the error instead of raising so the local phase still runs.
        """
        ids = [a.id for a in self.remote.unique(key=lambda a: a.id)]
        if not ids:
            return None
        logger.warning("%d server assets to delete.", len(ids))
        if dry_run:
            logger.warning("%d server assets to delete. skipped dry-run mode", len(ids))
            return None
        try:
            client.delete_assets(ids, force=False)
        except Exception as e:
            state.add_failure("delete-remote", ",".join(ids), e)
            return DeletionError(f"can't delete server's assets: {e}")
        return None

    def delete_local_files(self, state: RunState, dry_run: bool = False) -> int:
        """Remove the local files one by one, going on after failures."""
        files = self.local.unique(key=lambda f: f.full_path or f.file_name)
        if not files:
            return 0
        logger.info("%d local assets to delete.", len(files))
        removed = 0
        for f in files:
            if dry_run:
                logger.warning("file %r not deleted, dry run mode", f.title)
                continue
            logger.warning("delete file %r", f.title)
            try:
                f.remove()
                removed += 1
            except OSError as e:
                logger.error("Can't delete %r: %s", f.file_name, e)
                state.add_failure("delete-local", f.file_name, e)
        return removed
