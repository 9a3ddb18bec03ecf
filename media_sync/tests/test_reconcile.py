#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for the deferred work applied at the end of a run:
stacks, album memberships and deletions.
"""

import random
import threading
import time
from datetime import datetime, timedelta

from media_sync.errors import DeletionError
from media_sync.models.remote_asset import Album
from media_sync.models.run_state import RunState
from media_sync.reconcile.albums import AlbumReconciler
from media_sync.reconcile.deletions import ConcurrentList, DeletionSets
from media_sync.reconcile.stacking import StackBuilder
from media_sync.tests.fixtures.fake_catalog import FakeCatalogClient, local, remote

T0 = datetime(2023, 5, 1, 10, 0, 0)


class TestStackBuilder:
    """Grouping of uploaded assets into stacks."""

    def test_raw_and_jpeg_pair(self):
        b = StackBuilder()
        b.process_asset("raw", "trip/IMG_0001.CR2", T0)
        b.process_asset("jpg", "trip/IMG_0001.JPG", T0 + timedelta(minutes=10))
        stacks = b.stacks()
        assert len(stacks) == 1
        assert stacks[0].cover_id == "jpg"
        assert stacks[0].members_without_cover() == ["raw"]
        assert stacks[0].names == ["IMG_0001.CR2", "IMG_0001.JPG"]

    def test_burst(self):
        b = StackBuilder()
        b.process_asset("b1", "trip/B_001.jpg", T0)
        b.process_asset("b2", "trip/B_002.jpg", T0 + timedelta(milliseconds=400))
        b.process_asset("b3", "trip/B_003.jpg", T0 + timedelta(milliseconds=800))
        b.process_asset("far", "trip/B_004.jpg", T0 + timedelta(seconds=30))
        stacks = b.stacks()
        assert len(stacks) == 1
        assert stacks[0].ids == ["b1", "b2", "b3"]
        assert stacks[0].cover_id == "b1"

    def test_other_folders_never_stack(self):
        b = StackBuilder()
        b.process_asset("a", "one/IMG_0001.CR2", T0)
        b.process_asset("b", "two/IMG_0001.JPG", T0)
        assert b.stacks() == []

    def test_same_stem_without_raw_is_not_a_pair(self):
        b = StackBuilder()
        b.process_asset("a", "IMG_0001.JPG", T0)
        b.process_asset("b", "IMG_0001.MP4", T0 + timedelta(hours=1))
        assert b.stacks() == []

    def test_singletons_and_unknown_dates(self):
        b = StackBuilder()
        b.process_asset("a", "x/a.jpg", None)
        b.process_asset("b", "x/b.jpg", None)
        assert b.stacks() == []


class TestAlbumReconciler:
    """Album memberships collected during the run and applied once."""

    def test_creates_missing_album_once(self):
        client = FakeCatalogClient()
        r = AlbumReconciler()
        for i in ("id1", "id2", "id3"):
            r.add(i, "Vacation")
        state = RunState()

        assert r.reconcile(client, state) == 1

        creates = client.calls_named("create_album")
        assert len(creates) == 1
        assert creates[0][1] == "Vacation"
        assert sorted(creates[0][2]) == ["id1", "id2", "id3"]
        assert client.calls_named("add_assets_to_album") == []
        assert len(client.calls_named("get_all_albums")) == 1

    def test_appends_only_new_ids(self):
        client = FakeCatalogClient(albums=[Album(id="alb", name="Family", asset_ids=["x", "y"])])
        r = AlbumReconciler()
        for i in ("x", "z"):
            r.add(i, "Family")
        state = RunState()

        r.reconcile(client, state)

        appends = client.calls_named("add_assets_to_album")
        assert appends == [("add_assets_to_album", "alb", ["z"])]
        assert client.calls_named("create_album") == []
        assert state.failures == []

    def test_duplicate_result_is_not_a_failure(self):
        client = FakeCatalogClient(albums=[Album(id="alb", name="Family", asset_ids=[])])
        client.album_errors = {"z": "duplicate", "w": "no_permission"}
        r = AlbumReconciler()
        for i in ("w", "z"):
            r.add(i, "Family")
        state = RunState()

        r.reconcile(client, state)

        assert [f.target for f in state.failures] == ["Family/w"]

    def test_failing_album_does_not_stop_others(self):
        client = FakeCatalogClient()
        client.fail_albums = {"Broken"}
        r = AlbumReconciler()
        r.add("a", "Broken")
        r.add("b", "Fine")
        state = RunState()

        assert r.reconcile(client, state) == 1

        assert [c[1] for c in client.calls_named("create_album")] == ["Broken", "Fine"]
        assert [(f.phase, f.target) for f in state.failures] == [("album", "Broken")]

    def test_album_listing_failure(self):
        client = FakeCatalogClient()
        client.fail_list_albums = True
        r = AlbumReconciler()
        r.add("a", "Trip")
        state = RunState()

        assert r.reconcile(client, state) == 0
        assert client.calls_named("create_album") == []
        assert len(state.failures) == 1

    def test_dry_run_writes_nothing(self):
        client = FakeCatalogClient(albums=[Album(id="alb", name="Family", asset_ids=[])])
        r = AlbumReconciler()
        r.add("a", "Family")
        r.add("b", "New")

        assert r.reconcile(client, RunState(), dry_run=True) == 0
        assert client.calls_named("create_album") == []
        assert client.calls_named("add_assets_to_album") == []

    def test_nothing_pending_makes_no_call(self):
        client = FakeCatalogClient()
        r = AlbumReconciler()
        r.add("a", "")
        assert r.reconcile(client, RunState()) == 0
        assert client.calls == []

    def test_concurrent_adds(self):
        r = AlbumReconciler()

        def worker(n):
            for k in range(200):
                r.add(f"{n}-{k}", f"album-{k % 3}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        pending = r.pending()
        assert sum(len(ids) for ids in pending.values()) == 8 * 200


class TestDeletions:
    """Deferred removal of superseded server assets and local files."""

    def test_concurrent_pushes_keep_every_item(self):
        items = ConcurrentList()
        n_threads, per_thread = 16, 100

        def worker(n):
            rnd = random.Random(n)
            for k in range(per_thread):
                items.push((n, k))
                if rnd.random() < 0.05:
                    time.sleep(rnd.random() / 1000)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        got = list(items)
        assert len(got) == n_threads * per_thread
        assert set(got) == {(n, k) for n in range(n_threads) for k in range(per_thread)}

    def test_server_assets_deleted_in_one_call(self):
        client = FakeCatalogClient()
        sets = DeletionSets()
        a1, a2 = remote("a1", "x.jpg", 1, T0), remote("a2", "y.jpg", 1, T0)
        for a in (a1, a2, a1):
            sets.remote.push(a)

        assert sets.delete_server_assets(client, RunState()) is None
        assert client.calls_named("delete_assets") == [("delete_assets", ["a1", "a2"], False)]

    def test_server_delete_failure_is_returned(self):
        client = FakeCatalogClient()
        client.fail_delete = True
        sets = DeletionSets()
        sets.remote.push(remote("a1", "x.jpg", 1, T0))
        state = RunState()

        err = sets.delete_server_assets(client, state)

        assert isinstance(err, DeletionError)
        assert state.failures[0].phase == "delete-remote"

    def test_dry_run_deletes_nothing(self, tmp_path):
        client = FakeCatalogClient()
        path = tmp_path / "a.jpg"
        path.write_bytes(b"x")
        sets = DeletionSets()
        sets.remote.push(remote("a1", "x.jpg", 1, T0))
        sets.local.push(local("a.jpg", 1, T0, full_path=str(path)))

        state = RunState()
        assert sets.delete_server_assets(client, state, dry_run=True) is None
        assert sets.delete_local_files(state, dry_run=True) == 0
        assert client.calls == []
        assert path.exists()

    def test_local_files_removed_one_by_one(self, tmp_path):
        present = tmp_path / "a.jpg"
        present.write_bytes(b"x")
        sets = DeletionSets()
        sets.local.push(local("gone.jpg", 1, T0, full_path=str(tmp_path / "gone.jpg")))
        sets.local.push(local("a.jpg", 1, T0, full_path=str(present)))
        state = RunState()

        assert sets.delete_local_files(state) == 1

        assert not present.exists()
        assert [(f.phase, f.target) for f in state.failures] == [("delete-local", "gone.jpg")]
