"""Emission into collection scopes and the scope wrappers that receive them."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
import functools
import logging
from typing import Generic, TypeVar

from gleaner.exceptions import ScopeAbort
from gleaner.invariants import enforcement_enabled, never
from gleaner.scope_stack import DEFAULT_TAG, ScopeFrame, begin, end, find

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def emit(
    value: T,
    tag: Hashable = DEFAULT_TAG,
    continue_: bool = True,
    *,
    default: object = None,
) -> T | object:
    """Append ``value`` to the innermost live scope tagged ``tag``.

    With ``continue_=False`` the value is recorded and the target scope's
    body is abandoned immediately; control resumes after that scope with the
    values collected so far. Frames between the emission point and the target
    are popped and their values dropped.

    When no live scope matches, the emission is inert and returns ``default``
    unless enforcement is on, in which case it is fatal.
    """
    frame = find(tag)
    if frame is None:
        if enforcement_enabled():
            never(f"no enclosing scope for tag {tag!r}", tag=tag)
        logger.debug("unmatched emission for tag %r ignored", tag)
        return default
    frame.append(value)
    if not continue_:
        frame.aborted = True
        logger.debug("abort requested for scope tag=%r", frame.tag)
        raise ScopeAbort(frame)
    return value


@contextmanager
def collecting(tag: Hashable = DEFAULT_TAG) -> Iterator[ScopeFrame]:
    """Open a collection scope for the duration of a ``with`` block.

    The yielded frame holds the values after the block exits; ``aborted`` is
    set when an emission ended the block early.
    """
    frame = begin(tag)
    try:
        yield frame
    except ScopeAbort as abort:
        if abort.frame is not frame:
            raise
        logger.debug("abort delivered to scope tag=%r", frame.tag)
    finally:
        end(frame)


def run_scope(body: Callable[[], object], tag: Hashable = DEFAULT_TAG) -> list[object]:
    """Run ``body`` inside a fresh scope and return everything it collected."""
    with collecting(tag) as frame:
        body()
    return list(frame.values)


@dataclass(frozen=True)
class Collected(Generic[R]):
    result: R | None
    values: list[object] = field(default_factory=list)
    aborted: bool = False


def collects(
    tag: Hashable = DEFAULT_TAG,
) -> Callable[[Callable[..., R]], Callable[..., Collected[R]]]:
    """Decorate a function so each call runs in its own scope.

    The wrapped function returns a ``Collected`` with the original return
    value (``None`` when the call was aborted) and the collected values.
    """

    def decorate(func: Callable[..., R]) -> Callable[..., Collected[R]]:
        @functools.wraps(func)
        def wrapper(*args: object, **kwargs: object) -> Collected[R]:
            result: R | None = None
            with collecting(tag) as frame:
                result = func(*args, **kwargs)
            return Collected(
                result=result,
                values=list(frame.values),
                aborted=frame.aborted,
            )

        return wrapper

    return decorate
