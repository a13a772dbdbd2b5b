"""Config file discovery.

Walk-up finder locates roperty.toml, similar to how git finds .git/.
Supports the ROPERTY_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "roperty.toml"
CONFIG_ENV_VAR = "ROPERTY_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for roperty.toml.

    ROPERTY_CONFIG, when set, is used instead of walking; a path that
    does not exist yields None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent
