from __future__ import annotations
from typing import Callable, Optional

from discord_notify.config.store import ConfigStore
from discord_notify.errors import MissingConfigError
from discord_notify.models import CliInput, ResolvedConfig, StoredConfig

TOKEN_PROMPT = "Default bot token: "
CHANNEL_PROMPT = "Default channel/user id: "

def first_present(*values: Optional[str]) -> Optional[str]:
    """Return the first value that is neither None nor blank."""
    for v in values:
        if v is not None and v.strip():
            return v
    return None

def resolve(cli: CliInput, stored: Optional[StoredConfig]) -> ResolvedConfig:
    stored = stored or StoredConfig()
    token = first_present(cli.token, stored.token)
    channel = first_present(cli.channel_id, stored.channel)

    missing = []
    if token is None:
        missing.append("token")
    if channel is None:
        missing.append("channel")
    if missing:
        raise MissingConfigError(missing)

    return ResolvedConfig(token=token, channel_or_user_id=channel)

def initialize(prompt_fn: Callable[[str], str], store: ConfigStore) -> StoredConfig:
    # Always overwrites: this resets the defaults, it does not merge with them
    token = prompt_fn(TOKEN_PROMPT).strip()
    channel = prompt_fn(CHANNEL_PROMPT).strip()
    cfg = StoredConfig(channel=channel or None, token=token or None)
    store.store(cfg)
    return cfg
