from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

_SETTINGS_PATH = Path(__file__).with_name("settings.json")


@lru_cache(maxsize=1)
def get_settings() -> Dict[str, Any]:
    """Return the parsed settings.json contents.

    The file is read once; tests that patch the settings call
    ``get_settings.cache_clear()`` to force a re-read.
    """
    with _SETTINGS_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def tutorial_settings() -> Dict[str, Any]:
    """Shortcut for the ``tutorial`` section, empty when absent."""
    return dict(get_settings().get("tutorial", {}))


__all__ = ["get_settings", "tutorial_settings"]
