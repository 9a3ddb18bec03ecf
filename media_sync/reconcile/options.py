#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Per-run options of the upload engine.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Set

from ..config import DEFAULT_WORKERS, SUPPORTED_EXT
from ..errors import ConfigurationError
from ..utils.time import DateRange


def _normalize_ext(values) -> Set[str]:
    out = set()
    for v in values or ():
        v = v.strip().lower()
        if not v:
            continue
        out.add(v if v.startswith(".") else "." + v)
    return out


@dataclass
class UploadOptions:
    dry_run: bool = False
    delete_local: bool = False              # delete the local file once on the server
    create_albums: bool = True              # recreate the source albums
    create_album_after_folder: bool = False  # folder sources: album named after the parent folder
    import_into_album: str = ""             # every asset goes into this album
    partner_album: str = ""                 # partner assets go into this album
    keep_partner: bool = True
    keep_trashed: bool = False
    keep_untitled: bool = False
    use_folder_as_album_name: bool = False
    import_from_album: str = ""             # only files in this album
    create_stacks: bool = True
    workers: int = DEFAULT_WORKERS
    date_range: DateRange = field(default_factory=DateRange)
    select_types: Set[str] = field(default_factory=set)
    exclude_types: Set[str] = field(default_factory=set)
    show_progress: bool = True

    def __post_init__(self):
        self.select_types = _normalize_ext(self.select_types)
        self.exclude_types = _normalize_ext(self.exclude_types)

    def validate(self) -> "UploadOptions":
        overlap = self.select_types & self.exclude_types
        if overlap:
            raise ConfigurationError(f"extensions both selected and excluded: {', '.join(sorted(overlap))}")
        if self.workers < 1:
            raise ConfigurationError("workers must be at least 1")
        return self

    def accepts_extension(self, ext: str) -> bool:
        ext = ext.lower()
        if ext not in SUPPORTED_EXT:
            return False
        if self.select_types and ext not in self.select_types:
            return False
        return ext not in self.exclude_types

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date_range"] = str(self.date_range) if self.date_range.is_set() else None
        data["select_types"] = sorted(self.select_types)
        data["exclude_types"] = sorted(self.exclude_types)
        return data
