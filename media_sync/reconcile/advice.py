#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Decide what to do with a local file given what the server already holds.
"""

from datetime import datetime
from typing import Optional

from ..catalog.asset_index import AssetIndex
from ..config import DATE_TOLERANCE
from ..models.advice import Advice, AdviceCode
from ..models.local_file import LocalFile
from ..models.remote_asset import RemoteAsset
from ..utils.path import display_name
from ..utils.size import format_bytes
from ..utils.time import instant


def compare_dates(d1: Optional[datetime], d2: Optional[datetime]) -> int:
    """
    Compare capture instants with DATE_TOLERANCE slack.

    Returns 0 when both are within the tolerance, -1 when d1 is earlier and
    +1 when later. An unknown date only equals another unknown date.
    """
    if d1 is None or d2 is None:
        if d1 is None and d2 is None:
            return 0
        return -1 if d1 is None else 1
    diff = instant(d1) - instant(d2)
    if diff <= -DATE_TOLERANCE:
        return -1
    if diff >= DATE_TOLERANCE:
        return 1
    return 0


def _describe(sa: RemoteAsset) -> str:
    date = sa.captured_at.strftime("%Y-%m-%d %H:%M:%S") if sa.captured_at else "unknown"
    return f"name:{sa.original_file_name!r}, date:{date!r}"


def advice_same_on_server(sa: RemoteAsset) -> Advice:
    return Advice(
        code=AdviceCode.SAME_ON_SERVER,
        message=f"An asset with the same {_describe(sa)} and size:{format_bytes(sa.file_size)} "
                f"exists on the server. No need to upload.",
        server_asset=sa,
    )


def advice_smaller_on_server(sa: RemoteAsset) -> Advice:
    return Advice(
        code=AdviceCode.SMALLER_ON_SERVER,
        message=f"An asset with the same {_describe(sa)} but with smaller size:{format_bytes(sa.file_size)} "
                f"exists on the server. Replace it.",
        server_asset=sa,
    )


def advice_better_on_server(sa: RemoteAsset) -> Advice:
    return Advice(
        code=AdviceCode.BETTER_ON_SERVER,
        message=f"An asset with the same {_describe(sa)} but with bigger size:{format_bytes(sa.file_size)} "
                f"exists on the server. No need to upload.",
        server_asset=sa,
    )


def advice_not_on_server() -> Advice:
    return Advice(code=AdviceCode.NOT_ON_SERVER, message="This is a new asset, upload it.")


def should_upload(local: LocalFile, index: AssetIndex) -> Advice:
    """
    Classify local against the index.

    The server may hold several assets with the same name, cameras reuse
    them. The first name match whose capture date falls within the tolerance
    decides, later candidates are not examined.
    """
    sa = index.by_device_id(local.device_asset_id())
    if sa is not None:
        return advice_same_on_server(sa)

    size = local.file_size
    for sa in index.by_name(display_name(local.title, local.file_name)):
        if compare_dates(local.captured_at, sa.captured_at) != 0:
            continue
        if size == sa.file_size:
            return advice_same_on_server(sa)
        if size > sa.file_size:
            return advice_smaller_on_server(sa)
        return advice_better_on_server(sa)

    return advice_not_on_server()

