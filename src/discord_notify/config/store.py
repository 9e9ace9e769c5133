from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import yaml

from discord_notify.errors import ConfigStoreError
from discord_notify.models import APP_NAME, StoredConfig

logger = logging.getLogger(__name__)

CONFIG_ENV = "DISCORD_NOTIFY_CONFIG"

def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME", "").strip()
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME / "config.yaml"


class ConfigStore:
    """Persisted default token/channel record, one YAML mapping per file."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path).expanduser() if path else default_config_path()

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[StoredConfig]:
        if not self.exists():
            logger.debug(f"No stored config at {self.path}")
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigStoreError(f"configuration failed: cannot read {self.path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigStoreError(f"configuration failed: {self.path} is not a key-value mapping")
        return StoredConfig(channel=_as_str(raw.get("channel")), token=_as_str(raw.get("token")))

    def store(self, cfg: StoredConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump({"channel": cfg.channel, "token": cfg.token}, default_flow_style=False)
        # mkstemp creates the file 0600, which is what we want for a token
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, str(self.path))
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        logger.debug(f"Wrote stored config to {self.path}")


def _as_str(value) -> Optional[str]:
    # YAML turns bare numeric ids into ints
    if value is None:
        return None
    return str(value)
