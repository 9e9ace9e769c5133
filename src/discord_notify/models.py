from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

APP_NAME = "discord-notify"

@dataclass(frozen=True)
class CliInput:
    channel_id: Optional[str] = None
    token: Optional[str] = None
    prepend_message: Optional[str] = None
    read_stdin: bool = False
    dm: bool = False
    init: bool = False

@dataclass(frozen=True)
class StoredConfig:
    channel: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)

@dataclass(frozen=True)
class ResolvedConfig:
    token: str = field(repr=False)
    channel_or_user_id: str

class DispatchMode(Enum):
    DIRECT_MESSAGE = "dm"
    CHANNEL = "channel"

    @classmethod
    def from_flag(cls, dm: bool) -> "DispatchMode":
        return cls.DIRECT_MESSAGE if dm else cls.CHANNEL
