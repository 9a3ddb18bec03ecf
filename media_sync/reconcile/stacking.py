#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Group uploaded assets into stacks: RAW+JPEG pairs and burst sequences.
"""

import posixpath
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, List, Optional, Tuple

from ..config import RAW_EXT, STACK_BURST_WINDOW, STACK_COVER_EXT
from ..utils.path import parent_folder, split_stem
from ..utils.time import naive


@dataclass
class Stack:
    """A group of uploaded assets shown behind one cover."""
    cover_id: str
    ids: List[str] = field(default_factory=list)
    names: List[str] = field(default_factory=list)
    captured_at: Optional[datetime] = None

    def members_without_cover(self) -> List[str]:
        return [i for i in self.ids if i != self.cover_id]


class StackBuilder:
    """
    Collects uploaded assets during the run and groups them once at the end.

    Two assets of the same folder end up in the same stack when their
    capture dates are within STACK_BURST_WINDOW, or when they share a stem and
    one is a RAW file while the other is not. The cover is the first seen
    JPEG/HEIC member, or the first seen member when there is none.
    """

    def __init__(self, burst_window=STACK_BURST_WINDOW):
        self.burst_window = burst_window
        # deque.append is atomic, workers push without a lock
        self._queue: Deque[Tuple[str, str, Optional[datetime]]] = deque()

    def process_asset(self, asset_id: str, file_name: str, captured_at: Optional[datetime]):
        self._queue.append((asset_id, file_name, captured_at))

    def __len__(self) -> int:
        return len(self._queue)

    def stacks(self) -> List[Stack]:
        entries = list(self._queue)
        by_folder: Dict[str, List[int]] = defaultdict(list)
        for i, (_, name, _) in enumerate(entries):
            by_folder[parent_folder(name)].append(i)

        parent = list(range(len(entries)))

        def find(i: int) -> int:
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        def union(a: int, b: int):
            ra, rb = find(a), find(b)
            if ra != rb:
                parent[max(ra, rb)] = min(ra, rb)

        for members in by_folder.values():
            # bursts: neighbours in capture order
            dated = sorted((i for i in members if entries[i][2] is not None),
                           key=lambda i: naive(entries[i][2]))
            for a, b in zip(dated, dated[1:]):
                if naive(entries[b][2]) - naive(entries[a][2]) <= self.burst_window:
                    union(a, b)

            # RAW + processed pairs
            by_stem: Dict[str, List[int]] = defaultdict(list)
            for i in members:
                stem, _ = split_stem(entries[i][1])
                by_stem[stem.casefold()].append(i)
            for same in by_stem.values():
                raws = [i for i in same if split_stem(entries[i][1])[1] in RAW_EXT]
                others = [i for i in same if split_stem(entries[i][1])[1] not in RAW_EXT]
                if raws and others:
                    for i in raws + others:
                        union(same[0], i)

        groups: Dict[int, List[int]] = defaultdict(list)
        for i in range(len(entries)):
            groups[find(i)].append(i)

        result = []
        for members in groups.values():
            if len(members) < 2:
                continue
            members.sort()
            cover = next((i for i in members if split_stem(entries[i][1])[1] in STACK_COVER_EXT), members[0])
            dates = [naive(entries[i][2]) for i in members if entries[i][2] is not None]
            result.append(Stack(
                cover_id=entries[cover][0],
                ids=[entries[i][0] for i in members],
                names=[posixpath.basename(entries[i][1]) for i in members],
                captured_at=min(dates) if dates else None,
            ))

        result.sort(key=lambda s: (s.captured_at is None, s.captured_at or datetime.min, s.cover_id))
        return result
