#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Upload engine: classify every local file, upload what is missing, then
apply stacks, albums and deletions once the whole source has been seen.
"""

import logging
import posixpath
import uuid
from typing import List, Optional, Sequence

from ..catalog.asset_index import AssetIndex
from ..errors import CatalogError, DeletionError, RunCancelled
from ..models.advice import AdviceCode
from ..models.local_file import LocalAlbum, LocalFile
from ..models.run_state import RunReport, RunState
from .advice import should_upload
from .albums import AlbumReconciler
from .deletions import DeletionSets
from .options import UploadOptions
from .pipeline import WorkerPipeline
from .stacking import StackBuilder

logger = logging.getLogger(__name__)


class UploadEngine:
    """
    Runs one reconciliation of a local source against the server.

    The index is built by the caller. Every piece of mutable state lives in
    this object and in its RunState, a new engine is needed for each run.
    """

    def __init__(self, client, index: AssetIndex, options: Optional[UploadOptions] = None,
                 state: Optional[RunState] = None, google_photos: bool = False):
        self.client = client
        self.index = index
        self.options = (options or UploadOptions()).validate()
        self.state = state or RunState()
        self.google_photos = google_photos

        self.stacks = StackBuilder() if self.options.create_stacks else None
        self.albums = AlbumReconciler()
        self.deletions = DeletionSets()

    # -----------------------------
    # 1) RUN
    # -----------------------------

    def run(self, browser) -> RunReport:
        """
        Process everything the browser yields, then flush.

        Raises RunCancelled when the run is cancelled and DeletionError when
        the batched server deletion failed, in which case no local file is
        removed. Other flush failures are reported in RunReport.failures.
        """
        pipeline = WorkerPipeline(self.options.workers, self.state, show_progress=self.options.show_progress)
        pipeline.run(browser.browse(self.state.cancel_event), self.handle_asset)

        # Every worker has finished past this point
        deletion_error = self.flush()

        report = self.state.report()
        logger.info("%d media scanned, %d uploaded.", report.scanned, report.uploaded)
        if deletion_error is not None:
            raise deletion_error
        return report

    def flush(self) -> Optional[DeletionError]:
        """Stacks, then albums, then deletions."""
        self.flush_stacks()
        if self.albums.pending():
            logger.info("Managing albums")
            self.albums.reconcile(self.client, self.state, dry_run=self.options.dry_run)
        self._check_cancelled()
        deletion_error = self.deletions.delete_server_assets(self.client, self.state, dry_run=self.options.dry_run)
        if deletion_error is not None:
            logger.error("%s", deletion_error)
            return deletion_error
        self.deletions.delete_local_files(self.state, dry_run=self.options.dry_run)
        return None

    def flush_stacks(self) -> int:
        if self.stacks is None:
            return 0
        stacks = self.stacks.stacks()
        if stacks:
            logger.info("Creating stacks")
        done = 0
        for s in stacks:
            self._check_cancelled()
            logger.info("  Stacking %s...", ", ".join(s.names))
            if self.options.dry_run:
                continue
            try:
                self.client.update_assets(s.members_without_cover(), archived=False, favorite=False,
                                          remove_parent=False, stack_parent_id=s.cover_id)
                done += 1
            except CatalogError as e:
                logger.warning("Can't stack images: %s", e)
                self.state.add_failure("stack", s.cover_id, e)
        return done

    def _check_cancelled(self):
        if self.state.cancelled:
            raise RunCancelled("run cancelled")

    # -----------------------------
    # 2) PER FILE
    # -----------------------------

    def handle_asset(self, a: LocalFile):
        """Filter, classify and act on one local file."""
        opts = self.options
        self.state.incr("scanned")

        if a.error is not None:
            logger.warning("%s: %r", a.error, a.file_name)
            self.state.incr("skipped")
            return

        ext = posixpath.splitext(a.file_name)[1]
        if not opts.accepts_extension(ext):
            logger.debug("Unsupported extension, skipped: %r", a.file_name)
            self.state.incr("skipped")
            return
        if not opts.keep_partner and a.from_partner:
            self.state.incr("skipped")
            return
        if not opts.keep_trashed and a.trashed:
            self.state.incr("skipped")
            return
        if opts.import_from_album and not self.is_in_album(a, opts.import_from_album):
            self.state.incr("skipped")
            return
        if opts.date_range.is_set():
            if a.captured_at is None:
                logger.error("Can't get capture date of the file. File %r skipped", a.file_name)
                self.state.incr("skipped")
                return
            if not opts.date_range.in_range(a.captured_at):
                self.state.incr("skipped")
                return

        if not opts.keep_untitled:
            a.albums = [al for al in a.albums if al.name]

        logger.debug("handle_asset: %r", a)

        advice = should_upload(a, self.index)
        self.state.record_advice(advice.code)
        sa = advice.server_asset

        if advice.code == AdviceCode.NOT_ON_SERVER:
            logger.info("%s: %s", a.title, advice.message)
            if self.upload_asset(a) and opts.delete_local:
                self.deletions.local.push(a)

        elif advice.code == AdviceCode.SMALLER_ON_SERVER:
            logger.info("%s: %s", a.title, advice.message)
            # the replacement takes over every membership of the replaced asset
            if self.upload_asset(a, inherited_albums=sa.albums):
                self.deletions.remote.push(sa)
                if opts.delete_local:
                    self.deletions.local.push(a)

        elif advice.code == AdviceCode.SAME_ON_SERVER:
            self._reconcile_existing(a, sa.id, include_import_album=True)
            if sa.just_uploaded:
                return
            logger.info("%s: %s", a.title, advice.message)
            if opts.delete_local:
                self.deletions.local.push(a)

        elif advice.code == AdviceCode.BETTER_ON_SERVER:
            logger.info("%s: %s", a.title, advice.message)
            self._reconcile_existing(a, sa.id, include_import_album=False)

    def _reconcile_existing(self, a: LocalFile, asset_id: str, include_import_album: bool):
        opts = self.options
        if opts.create_albums:
            for al in a.albums:
                self.add_to_album(asset_id, self.album_name(al))
        if include_import_album and opts.import_into_album:
            self.add_to_album(asset_id, opts.import_into_album)
        if opts.partner_album and a.from_partner:
            self.add_to_album(asset_id, opts.partner_album)

    def upload_asset(self, a: LocalFile, inherited_albums: Sequence[str] = ()) -> bool:
        """
        Upload a, record it and queue its albums. False when nothing was uploaded.

        inherited_albums are queued whatever the album options say.
        """
        opts = self.options
        if self.state.cancelled:
            return False

        if opts.dry_run:
            asset_id = str(uuid.uuid4())
        else:
            try:
                resp = self.client.upload_asset(a)
            except (CatalogError, OSError) as e:
                logger.error("Uploading %r failed: %s", a.file_name, e)
                self.state.incr("errors")
                return False
            if resp.duplicate:
                logger.warning("%r already exists on the server", a.file_name)
                return False
            asset_id = resp.id

        self.index.add_local_asset(a, asset_id)
        total = self.state.incr("uploaded")
        if opts.dry_run:
            logger.info("Uploading %r skipped - dry run mode, total %d uploaded", a.file_name, total)
        else:
            logger.info("Uploading %r done, total %d uploaded", a.file_name, total)

        if self.stacks is not None:
            self.stacks.process_asset(asset_id, a.file_name, a.captured_at)

        names = self._albums_for_upload(a)
        for n in inherited_albums:
            if n and n not in names:
                names.append(n)
        if names:
            logger.info("%r added in album(s) %s", a.file_name, ", ".join(names))
            for n in names:
                self.add_to_album(asset_id, n)
        return True

    def _albums_for_upload(self, a: LocalFile) -> List[str]:
        opts = self.options
        albums: List[LocalAlbum] = []
        if opts.import_into_album:
            albums.append(LocalAlbum(path=opts.import_into_album, name=opts.import_into_album))
        elif self.google_photos:
            if opts.create_albums:
                albums.extend(a.albums)
            if opts.partner_album and a.from_partner:
                albums.append(LocalAlbum(path=opts.partner_album, name=opts.partner_album))
        elif opts.create_album_after_folder:
            folder = posixpath.basename(posixpath.dirname(a.file_name))
            if folder and folder != ".":
                albums.append(LocalAlbum(path=folder, name=folder))
        elif opts.create_albums:
            albums.extend(a.albums)

        names = []
        for al in albums:
            name = self.album_name(al)
            if name and name not in names:
                names.append(name)
        return names

    def album_name(self, al: LocalAlbum) -> str:
        name = al.name
        if self.google_photos:
            if self.options.use_folder_as_album_name:
                name = al.path
            elif self.options.keep_untitled and not name:
                name = al.path
        return name

    def is_in_album(self, a: LocalFile, album: str) -> bool:
        return any(self.album_name(al) == album for al in a.albums)

    def add_to_album(self, asset_id: str, album: str):
        self.albums.add(asset_id, album)
