#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Upload command (thin wrapper).
Builds the server index once and runs the upload engine on every source path.
"""

from pathlib import Path
from typing import List, Optional

from ..catalog.asset_index import AssetIndex
from ..errors import DeletionError
from ..models.run_state import RunReport, RunState
from ..reconcile.engine import UploadEngine
from ..reconcile.options import UploadOptions
from ..scanning.folder import FolderBrowser
from ..utils.time import utc_now_str


class UploadCommand:
    def __init__(self, client, options: UploadOptions, quiet: bool = False):
        self.client = client
        self.options = options.validate()
        self.quiet = quiet
        self.state: Optional[RunState] = None
        self.report: Optional[RunReport] = None

    def _print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def execute(self, sources: List[Path]) -> RunReport:
        """Upload every source folder, returns the combined report."""
        self._print_header(sources)

        self._print(f"[{utc_now_str()}] Ask for server's assets...")
        index = AssetIndex.from_client(self.client)
        self._print(f"  - {len(index):,} asset(s) received")

        total = self.report = RunReport()
        deletion_errors = []
        for source in sources:
            self._print(f"[{utc_now_str()}] Browsing folder {source}...")
            self.state = RunState()
            engine = UploadEngine(self.client, index, self.options, state=self.state)
            browser = FolderBrowser(source, album_after_folder=self.options.create_album_after_folder)
            try:
                report = engine.run(browser)
            except DeletionError as e:
                deletion_errors.append(str(e))
                report = self.state.report()
            self._merge(total, report)

        self._print_summary(total)
        if deletion_errors:
            raise DeletionError("; ".join(deletion_errors))
        return total

    def cancel(self):
        if self.state is not None:
            self.state.cancel()

    @staticmethod
    def _merge(total: RunReport, report: RunReport):
        total.scanned += report.scanned
        total.uploaded += report.uploaded
        total.skipped += report.skipped
        total.errors += report.errors
        for code, n in report.advice.items():
            total.advice[code] = total.advice.get(code, 0) + n
        total.failures.extend(report.failures)

    def _print_header(self, sources: List[Path]):
        self._print("=" * 80)
        self._print(f"MEDIA SYNC UPLOAD - {utc_now_str()}")
        self._print("=" * 80)
        for s in sources:
            self._print(f"Source: {s}")
        self._print(f"Workers: {self.options.workers}")
        self._print(f"Dry run: {self.options.dry_run}")
        self._print(f"Stacks: {'Enabled' if self.options.create_stacks else 'Disabled'}")
        if self.options.date_range.is_set():
            self._print(f"Date range: {self.options.date_range}")
        self._print()

    def _print_summary(self, report: RunReport):
        self._print()
        self._print("=== UPLOAD SUMMARY ===")
        self._print(f"Media scanned: {report.scanned:,}")
        self._print(f"Uploaded: {report.uploaded:,}")
        self._print(f"Skipped: {report.skipped:,}")
        self._print(f"Errors: {report.errors:,}")
        for code, n in sorted(report.advice.items()):
            self._print(f"  {code}: {n:,}")
        if report.failures:
            self._print(f"Deferred operations failed: {len(report.failures)}")
            for f in report.failures:
                self._print(f"  [{f.phase}] {f.target}: {f.error}")
        self._print("=" * 80)
