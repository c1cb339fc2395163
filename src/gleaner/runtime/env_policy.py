from __future__ import annotations

import os

_TRUTHY_VALUES = {"1", "true", "yes", "on", "strict"}
_FALSEY_VALUES = {"0", "false", "no", "off"}

ENFORCE_ENV_KEY = "GLEANER_ENFORCE"


def env_optional_flag(name: str, *, value: str | None = None) -> bool | None:
    """Tri-state read: unset or unrecognised text yields ``None``."""
    text = value if isinstance(value, str) else os.getenv(name)
    if text is None:
        return None
    normalized = text.strip().lower()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSEY_VALUES:
        return False
    return None
