"""Marker payloads carried by fatal invariant violations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from hashlib import sha1
import json
from types import MappingProxyType
from typing import Mapping


class MarkerKind(StrEnum):
    NEVER = "never"


@dataclass(frozen=True)
class MarkerPayload:
    marker_kind: MarkerKind
    reason: str
    env: dict[str, object]


_EMPTY_ENV: Mapping[str, object] = MappingProxyType({})


def _env_value_text(value: object) -> str:
    # Tags may be arbitrary hashables; identity only needs a stable rendering.
    if isinstance(value, (str, int, float, bool)) or value is None:
        return json.dumps(value)
    return repr(value)


def normalize_marker_payload(
    *,
    reason: str,
    env: Mapping[str, object] = _EMPTY_ENV,
    marker_kind: MarkerKind = MarkerKind.NEVER,
) -> MarkerPayload:
    normalized_reason = str(reason or "never() invariant reached").strip()
    env_payload = {str(key): value for key, value in env.items()}
    return MarkerPayload(
        marker_kind=marker_kind,
        reason=normalized_reason,
        env=env_payload,
    )


def marker_identity(payload: MarkerPayload) -> str:
    identity_payload = {
        "marker_kind": payload.marker_kind.value,
        "reason": payload.reason,
        "env_keys": sorted(payload.env),
    }
    encoded = json.dumps(identity_payload, separators=(",", ":"), sort_keys=True)
    digest = sha1(encoded.encode("utf-8")).hexdigest()[:12]
    return f"{payload.marker_kind.value}:{digest}"


def render_marker_env(payload: MarkerPayload) -> str:
    return ", ".join(
        f"{key}={_env_value_text(payload.env[key])}" for key in sorted(payload.env)
    )


def never_marker_payload(
    *,
    reason: str = "",
    env: Mapping[str, object] = _EMPTY_ENV,
) -> MarkerPayload:
    return normalize_marker_payload(
        reason=reason,
        env=env,
        marker_kind=MarkerKind.NEVER,
    )
