from __future__ import annotations

import os
from pathlib import Path


def cardstage_home() -> Path:
    env = os.environ.get("CARDSTAGE_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".cardstage"


def config_path() -> Path:
    # Highest precedence override (useful for tests).
    env = os.environ.get("CARDSTAGE_CONFIG_PATH")
    if env:
        return Path(env).expanduser()
    return cardstage_home() / "config.json"
