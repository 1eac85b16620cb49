"""text.py - Small string helpers shared by the formatter and tree renderer."""

import math
from typing import List

NEWLINE = "\n"


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``NEWLINE`` and drop empty entries."""
    return [line for line in text.split(NEWLINE) if line]


def indent(text: str, amount: int) -> str:
    """Prefix every non-empty line of ``text`` with ``amount`` spaces.

    Empty lines are dropped and the result carries no trailing newline.

    Example:
        >>> indent("a\\nb\\n", 2)
        '  a\\n  b'
    """
    pad = " " * amount
    return NEWLINE.join(pad + line for line in split_lines(text))


def reset_indent(text: str) -> str:
    """Strip leading whitespace from every non-empty line of ``text``.

    Each kept line is terminated by ``NEWLINE``.
    """
    return "".join(line.lstrip() + NEWLINE for line in split_lines(text))


def censor(text: str, censor_percent: float = 0.4, censor_char: str = "•") -> str:
    """Mask the tail of ``text``, keeping the leading ``censor_percent`` share.

    Useful for writing tokens or account numbers into a log without leaking
    them in full.

    Args:
        text: The text to censor.
        censor_percent: Share of characters (0 to 1) kept readable, counted
            from the left and rounded down.
        censor_char: Replacement character for the hidden part.

    Raises:
        ValueError: If ``censor_percent`` lies outside ``[0, 1]``.

    Example:
        >>> censor("secret1234")
        'secr••••••'
    """
    if not 0 <= censor_percent <= 1:
        raise ValueError(f"censor_percent must be between 0 and 1, got {censor_percent}")
    keep = math.floor(len(text) * censor_percent)
    return text[:keep] + censor_char * (len(text) - keep)
