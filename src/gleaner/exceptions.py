"""Exception protocol for collection scopes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gleaner.marker_protocol import MarkerPayload
    from gleaner.scope_stack import ScopeFrame


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that must be unreachable.

    Reaching one of these means the caller broke a usage contract of the
    collection machinery (for example ending scopes out of order). It is a
    programmer error, never a data error, and is not meant to be recovered.
    """

    def __init__(self, message: str, *, marker_payload: MarkerPayload | None = None):
        from gleaner.marker_protocol import marker_identity, never_marker_payload

        super().__init__(message)
        payload = marker_payload or never_marker_payload(reason=message)
        self.marker_payload = payload
        self.marker_id = marker_identity(payload)
        self.marker_kind = payload.marker_kind.value

    @property
    def env(self) -> dict[str, object]:
        return dict(self.marker_payload.env)

    def __str__(self) -> str:
        from gleaner.marker_protocol import render_marker_env

        message = super().__str__()
        details = render_marker_env(self.marker_payload)
        if not details:
            return message
        return f"{message} ({details})"


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""


class ScopeAbort(BaseException):
    """Non-local exit delivered to the scope that owns ``frame``.

    Derives from BaseException so that ``except Exception`` blocks between
    the emission point and the target scope do not intercept it.
    """

    def __init__(self, frame: ScopeFrame) -> None:
        super().__init__(f"abort to scope tagged {frame.tag!r}")
        self.frame = frame
