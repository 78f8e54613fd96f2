from typing import List

from .message import (
    DEFAULT_POLICY,
    MessageKind,
    MessagePolicy,
    ParsedMessage,
    classify_line,
)
from .mapper import format_location, resolve_segment
from .views import TextView

# Compiler logs may echo raw source bytes that are not valid UTF-8
LOG_ENCODING = "utf-8"
LOG_ERRORS = "replace"


def split_lines(output: str) -> List[str]:
    """
    Splits on "\\n" only, dropping one trailing "\\r" per line.
    str.splitlines() would also break on \\x0b, \\x0c, \\x85, \\u2028 and
    friends, which can legitimately appear inside a diagnostic body.
    """
    lines = output.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def classify_output(output: str, policy: MessagePolicy = DEFAULT_POLICY) -> List[ParsedMessage]:
    """
    Classifies captured compiler output line by line.
    One result per input line, in order; nothing is merged or dropped.
    """
    return [classify_line(line, policy) for line in split_lines(output)]
