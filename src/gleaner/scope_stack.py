"""Context-local stack of live collection scopes.

Each execution context (thread, asyncio task, copied ``contextvars.Context``)
owns its stack. The stack itself is an immutable snapshot stored in a
``ContextVar``; pushing or popping installs a new snapshot, so a child context
that inherited its parent's frames can still emit into them while its own
pushes and pops never leak back into the parent.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from enum import Enum
import logging

from gleaner.invariants import never

logger = logging.getLogger(__name__)


class _DefaultTag(Enum):
    DEFAULT = "default"

    def __repr__(self) -> str:
        return "<default tag>"


DEFAULT_TAG = _DefaultTag.DEFAULT


def tags_match(candidate: object, tag: object) -> bool:
    # 1 == 1.0 == True in Python; tags must agree on type as well as value.
    if candidate is tag:
        return True
    return type(candidate) is type(tag) and candidate == tag


@dataclass(eq=False)
class ScopeFrame:
    tag: Hashable = DEFAULT_TAG
    values: list[object] = field(default_factory=list)
    aborted: bool = False

    def append(self, value: object) -> None:
        self.values.append(value)

    def __repr__(self) -> str:
        return (
            f"ScopeFrame(tag={self.tag!r}, values={len(self.values)}, "
            f"aborted={self.aborted})"
        )


@dataclass(frozen=True)
class ScopeStack:
    frames: tuple[ScopeFrame, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.frames)

    @property
    def top(self) -> ScopeFrame | None:
        if not self.frames:
            return None
        return self.frames[-1]

    def push(self, frame: ScopeFrame) -> ScopeStack:
        return ScopeStack(frames=(*self.frames, frame))

    def pop(self, frame: ScopeFrame) -> ScopeStack:
        top = self.top
        if top is not frame:
            never(
                "scope ended out of order",
                tag=frame.tag,
                top_tag=top.tag if top is not None else None,
                depth=self.depth,
            )
        return ScopeStack(frames=self.frames[:-1])

    def find(self, tag: object) -> ScopeFrame | None:
        for frame in reversed(self.frames):
            if tags_match(frame.tag, tag):
                return frame
        return None

    def __contains__(self, frame: object) -> bool:
        return any(candidate is frame for candidate in self.frames)


_EMPTY_STACK = ScopeStack()

_scope_stack_var: ContextVar[ScopeStack] = ContextVar(
    "gleaner_scope_stack",
    default=_EMPTY_STACK,
)


def current_stack() -> ScopeStack:
    return _scope_stack_var.get()


def set_scope_stack(stack: ScopeStack) -> Token[ScopeStack]:
    return _scope_stack_var.set(stack)


def reset_scope_stack(token: Token[ScopeStack]) -> None:
    _scope_stack_var.reset(token)


def begin(tag: Hashable = DEFAULT_TAG) -> ScopeFrame:
    """Push a new empty frame for ``tag`` and return it as the scope handle."""
    frame = ScopeFrame(tag=tag)
    stack = current_stack().push(frame)
    _scope_stack_var.set(stack)
    logger.debug("scope begin tag=%r depth=%d", tag, stack.depth)
    return frame


def end(frame: ScopeFrame) -> list[object]:
    """Pop ``frame`` and return its values in emission order.

    ``frame`` must be the innermost live scope; anything else means scopes
    were torn down out of order and is fatal.
    """
    stack = current_stack().pop(frame)
    _scope_stack_var.set(stack)
    logger.debug(
        "scope end tag=%r values=%d aborted=%s depth=%d",
        frame.tag,
        len(frame.values),
        frame.aborted,
        stack.depth,
    )
    return list(frame.values)


def find(tag: Hashable = DEFAULT_TAG) -> ScopeFrame | None:
    return current_stack().find(tag)


def depth() -> int:
    return current_stack().depth


@contextmanager
def isolated_scope_stack() -> Iterator[ScopeStack]:
    """Run a block against a fresh empty stack, restoring the previous one."""
    token = set_scope_stack(_EMPTY_STACK)
    try:
        yield _EMPTY_STACK
    finally:
        reset_scope_stack(token)
