"""tree.py - Box-drawing renderer for exception chains.

An exception logged through a LogWriter is written as a tree rather than as
Python's usual traceback text, so that chained exceptions stay readable
inside a single log entry::

    app.errors.PaymentError: charge failed
      ┌ File "/srv/app/billing.py", line 42, in charge
      ├     gateway.submit(order)
      └ ...
        Inner Exception:
        TimeoutError: gateway did not answer
          ┬ File "/srv/app/gateway.py", line 17, in submit
          └     raise TimeoutError("gateway did not answer")

Each inner exception is rendered 4 spaces deeper than the one wrapping it.
The chain is walked with a loop, never by recursion, so very long chains do
not exhaust the interpreter stack, and a chain that loops back on itself is
cut at the first repeated exception.
"""

import traceback
from dataclasses import dataclass
from typing import List, Optional, Set, Union

from .text import NEWLINE, indent, split_lines

TREE_START = "┌"
TREE_ITEM = "├"
TREE_END = "└"
SUBTREE_START = "┬"
H_SPACER = "─"

INNER_LABEL = "Inner Exception:"
INNER_INDENT = 4


@dataclass(frozen=True)
class ExceptionNode:
    """One link of an exception chain, detached from the live exception.

    Attributes:
        type_name: Display name of the exception class.
        message: ``str()`` of the exception.
        stack_trace: Formatted stack frames, or ``None`` if the exception was
            never raised.
        inner: The exception this one wraps, if any.
    """

    type_name: str
    message: str
    stack_trace: Optional[str] = None
    inner: Optional["ExceptionNode"] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionNode":
        """Snapshot ``exc`` and the exceptions it wraps as a node chain.

        The wrapped exception is ``__cause__`` (``raise ... from ...``) or,
        failing that, ``__context__`` unless it was suppressed with
        ``from None``.
        """
        chain: List[BaseException] = []
        seen: Set[int] = set()
        current: Optional[BaseException] = exc
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(current)
            current = _inner_of(current)

        node = None
        for item in reversed(chain):
            node = cls(_type_name(item), str(item), _stack_trace(item), node)
        return node


def _inner_of(exc: BaseException) -> Optional[BaseException]:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__context__ is not None and not exc.__suppress_context__:
        return exc.__context__
    return None


def _type_name(exc: BaseException) -> str:
    cls = type(exc)
    if cls.__module__ in ("builtins", "__main__"):
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _stack_trace(exc: BaseException) -> Optional[str]:
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_tb(exc.__traceback__))


def build_tree(
    text: str, subtree: bool = False, is_end: bool = True, base_indent: int = 0
) -> str:
    """Draw the lines of ``text`` as a box-drawing tree.

    ::

        ┌ first line
        ├ middle line
        └ last line

    Args:
        text: Multi-line input. Empty lines are ignored.
        subtree: Open with ``┬`` instead of ``┌``, for a tree that hangs off
            another one.
        is_end: If False, the last line gets ``├`` and the tree is closed by
            an extra ``└─`` line, for a tree that is continued by a sibling.
        base_indent: Spaces added to every line on top of the first line's
            own leading whitespace.

    Returns:
        The tree, without a trailing newline. A single line is rendered as
        ``─ line`` with no tree glyphs and without any indent, neither its
        own leading whitespace nor ``base_indent``; no lines at all give
        ``""``.
    """
    lines = split_lines(text)
    if not lines:
        return ""
    if len(lines) == 1:
        return f"{H_SPACER} {lines[0].lstrip()}"

    first = lines[0].lstrip(" \t")
    pad = " " * (len(lines[0]) - len(first) + base_indent)
    start = SUBTREE_START if subtree else TREE_START

    out = [f"{pad}{start} {first}"]
    out.extend(f"{pad}{TREE_ITEM} {line}" for line in lines[1:-1])
    if is_end:
        out.append(f"{pad}{TREE_END} {lines[-1]}")
    else:
        out.append(f"{pad}{TREE_ITEM} {lines[-1]}")
        out.append(f"{pad}{TREE_END}{H_SPACER}")
    return NEWLINE.join(out)


def render_exception(exception: Union[BaseException, ExceptionNode]) -> str:
    """Render an exception and every exception it wraps as one text block.

    Args:
        exception: A live exception or an already captured ExceptionNode.

    Returns:
        The rendered chain without a trailing newline.
    """
    if isinstance(exception, ExceptionNode):
        node: Optional[ExceptionNode] = exception
    else:
        node = ExceptionNode.from_exception(exception)

    blocks = []
    seen: Set[int] = set()
    depth = 0
    while node is not None and id(node) not in seen:
        seen.add(id(node))
        lines = [INNER_LABEL] if depth else []
        lines.append(f"{node.type_name}: {node.message}")
        if node.stack_trace and node.stack_trace.strip():
            lines.append(build_tree(node.stack_trace, subtree=depth > 0))
        blocks.append(indent(NEWLINE.join(lines), INNER_INDENT * depth))
        node = node.inner
        depth += 1
    return NEWLINE.join(blocks)
