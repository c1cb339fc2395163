"""Invariant markers and the emission enforcement policy."""

from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from contextvars import ContextVar, Token
import logging
import threading
from typing import Iterator, NoReturn

from gleaner.exceptions import NeverThrown

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnforcementConfig:
    enabled: bool = False


# Process-wide; contextvars would not reach threads started before the toggle.
_ENFORCEMENT_CONFIG = EnforcementConfig()
_ENFORCEMENT_LOCK = threading.Lock()

_ENFORCEMENT_OVERRIDE: ContextVar[bool | None] = ContextVar(
    "gleaner_enforcement_override",
    default=None,
)


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is diagnostic metadata attached to the raised
    ``NeverThrown``; it is not evaluated.
    """
    from gleaner.marker_protocol import never_marker_payload

    payload = never_marker_payload(reason=reason, env=env)
    raise NeverThrown(payload.reason, marker_payload=payload)


def set_enforcement_config(config: EnforcementConfig) -> EnforcementConfig:
    global _ENFORCEMENT_CONFIG
    with _ENFORCEMENT_LOCK:
        previous = _ENFORCEMENT_CONFIG
        _ENFORCEMENT_CONFIG = config
    logger.debug("emission enforcement set to %s", config.enabled)
    return previous


def configure_enforcement(enabled: bool) -> None:
    """Make unmatched emissions fatal (or inert) for the whole process."""
    set_enforcement_config(EnforcementConfig(enabled=bool(enabled)))


def enforcement_enabled() -> bool:
    override = _ENFORCEMENT_OVERRIDE.get()
    if override is not None:
        return bool(override)
    return bool(_ENFORCEMENT_CONFIG.enabled)


@contextmanager
def enforcement_config_scope(config: EnforcementConfig) -> Iterator[None]:
    previous = set_enforcement_config(config)
    try:
        yield
    finally:
        set_enforcement_config(previous)


def set_enforcement_override(enabled: bool | None) -> Token[bool | None]:
    return _ENFORCEMENT_OVERRIDE.set(enabled)


def reset_enforcement_override(token: Token[bool | None]) -> None:
    _ENFORCEMENT_OVERRIDE.reset(token)


@contextmanager
def enforcement_scope(enabled: bool) -> Iterator[None]:
    token = set_enforcement_override(bool(enabled))
    try:
        yield
    finally:
        reset_enforcement_override(token)
