#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Deferred album membership: collect during the run, apply once at the end.
"""

import logging
import threading
from typing import Dict, List, Set

from ..config import DUPLICATE_ERROR
from ..models.run_state import RunState

logger = logging.getLogger(__name__)


class AlbumReconciler:
    """Accumulates album name -> asset ids, then creates or appends per album."""

    def __init__(self):
        self._lock = threading.Lock()
        self._albums: Dict[str, Set[str]] = {}

    def add(self, asset_id: str, album: str):
        if not album:
            return
        with self._lock:
            self._albums.setdefault(album, set()).add(asset_id)

    def pending(self) -> Dict[str, Set[str]]:
        with self._lock:
            return {name: set(ids) for name, ids in self._albums.items()}

    def reconcile(self, client, state: RunState, dry_run: bool = False) -> int:
        """
        Apply the collected memberships. Returns the number of albums touched.

        A failing album is recorded in state and the next one is processed.
        """
        with self._lock:
            if not self._albums:
                return 0

            try:
                server_albums = client.get_all_albums()
            except Exception as e:
                logger.error("Can't get the album list from the server: %s", e)
                state.add_failure("album", "*", e)
                return 0

            touched = 0
            for name in sorted(self._albums):
                if state.cancelled:
                    break
                ids = self._albums[name]
                try:
                    if self._apply(client, state, name, ids, server_albums, dry_run):
                        touched += 1
                except Exception as e:
                    logger.error("Album %r: %s", name, e)
                    state.add_failure("album", name, e)
            return touched

    def _apply(self, client, state: RunState, name: str, ids: Set[str], server_albums, dry_run: bool) -> bool:
        matches = [a for a in server_albums if a.name == name]
        if not matches:
            if dry_run:
                logger.info("Create the album %s skipped - dry run mode", name)
                return False
            logger.info("Create the album %s with %d asset(s)", name, len(ids))
            client.create_album(name, sorted(ids))
            return True

        touched = False
        for album in matches:
            new_ids: List[str] = sorted(ids - set(album.asset_ids))
            if not new_ids:
                logger.debug("Album %s already holds all %d asset(s)", name, len(ids))
                continue
            if dry_run:
                logger.info("Update album %s skipped - dry run mode", name)
                continue
            logger.info("Update the album %s", name)
            results = client.add_assets_to_album(album.id, new_ids)
            added = 0
            for r in results:
                if r.success:
                    added += 1
                elif r.error != DUPLICATE_ERROR:
                    logger.warning("%s: %s", r.id, r.error)
                    state.add_failure("album", f"{name}/{r.id}", r.error)
            if added:
                logger.info("%d asset(s) added to the album %r", added, name)
            touched = True
        return touched
