#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Classification of a local file against the remote catalog.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .remote_asset import RemoteAsset


class AdviceCode(Enum):
    NOT_ON_SERVER = "NotOnServer"
    SMALLER_ON_SERVER = "SmallerOnServer"
    BETTER_ON_SERVER = "BetterOnServer"
    SAME_ON_SERVER = "SameOnServer"

    def __str__(self) -> str:
        return self.value


@dataclass
class Advice:
    """What to do with one local file, and why."""
    code: AdviceCode
    message: str
    server_asset: Optional[RemoteAsset] = None
