"""
Classifies one line of glslang diagnostic output.

glslang reports problems one per line, in one of these shapes:

    ERROR: 0:2: '#' : invalid directive: foo
    WARNING: shader.vert:5: something wrong
    ERROR: too many functions: got 1666473 of them
    Warning, version 1000 is unknown.

The first two carry a location (segment index or file name, then a line
number); the others apply to the whole compilation unit. Anything else is
not a diagnostic at all and comes back as MessageKind.UNKNOWN.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from .views import TextView

ERROR_PREFIX = "ERROR: "
WARNING_PREFIX = "WARNING: "
ALT_WARNING_PREFIX = "Warning, "


class MessageKind(str, Enum):
    UNKNOWN = "unknown"
    GLOBAL_ERROR = "global_error"
    GLOBAL_WARNING = "global_warning"
    ERROR = "error"
    WARNING = "warning"

    @property
    def is_error(self) -> bool:
        return self in (MessageKind.ERROR, MessageKind.GLOBAL_ERROR)

    @property
    def is_warning(self) -> bool:
        return self in (MessageKind.WARNING, MessageKind.GLOBAL_WARNING)

    @property
    def has_location(self) -> bool:
        return self in (MessageKind.ERROR, MessageKind.WARNING)


@dataclass(frozen=True)
class MessagePolicy:
    """Build-configuration switches that rewrite the parsed kind."""
    warnings_as_errors: bool = False
    suppress_warnings: bool = False


DEFAULT_POLICY = MessagePolicy()


@dataclass(frozen=True)
class ParsedMessage:
    kind: MessageKind = MessageKind.UNKNOWN
    segment: TextView = field(default_factory=TextView.empty)
    line_number: TextView = field(default_factory=TextView.empty)
    body: TextView = field(default_factory=TextView.empty)

    @property
    def line_no(self) -> Optional[int]:
        """The line number as an int, or None for unlocated messages."""
        if not self.line_number:
            return None
        return int(self.line_number.text)


UNKNOWN_MESSAGE = ParsedMessage()


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _split_location(line: str, start: int) -> Optional[Tuple[TextView, TextView, TextView]]:
    """
    Matches `<segment>:<line>: <body>` against line[start:].
    Returns (segment, line_number, body) views or None if any piece is missing.
    """
    colon = line.find(":", start)
    if colon <= start:
        # no colon at all, or an empty segment
        return None

    digits_end = colon + 1
    while digits_end < len(line) and _is_ascii_digit(line[digits_end]):
        digits_end += 1
    if digits_end == colon + 1:
        return None

    if not line.startswith(": ", digits_end):
        return None

    return (
        TextView(line, start, colon),
        TextView(line, colon + 1, digits_end),
        TextView(line, digits_end + 2, len(line)),
    )


def _match_grammar(line: str) -> ParsedMessage:
    """Severity and location only; policy is applied afterwards."""
    if line.startswith(ERROR_PREFIX):
        located, unlocated = MessageKind.ERROR, MessageKind.GLOBAL_ERROR
        start = len(ERROR_PREFIX)
    elif line.startswith(WARNING_PREFIX):
        located, unlocated = MessageKind.WARNING, MessageKind.GLOBAL_WARNING
        start = len(WARNING_PREFIX)
    elif line.startswith(ALT_WARNING_PREFIX):
        start = len(ALT_WARNING_PREFIX)
        if start == len(line):
            return UNKNOWN_MESSAGE
        # this spelling never carries a location
        return ParsedMessage(MessageKind.GLOBAL_WARNING, body=TextView(line, start, len(line)))
    else:
        return UNKNOWN_MESSAGE

    if start == len(line):
        return UNKNOWN_MESSAGE

    location = _split_location(line, start)
    if location is None:
        return ParsedMessage(unlocated, body=TextView(line, start, len(line)))

    segment, line_number, body = location
    return ParsedMessage(located, segment, line_number, body)


def suppress(message: ParsedMessage, policy: MessagePolicy) -> ParsedMessage:
    if policy.suppress_warnings and message.kind.is_warning:
        return UNKNOWN_MESSAGE
    return message


def promote(message: ParsedMessage, policy: MessagePolicy) -> ParsedMessage:
    if not policy.warnings_as_errors:
        return message
    if message.kind == MessageKind.WARNING:
        return replace(message, kind=MessageKind.ERROR)
    if message.kind == MessageKind.GLOBAL_WARNING:
        return replace(message, kind=MessageKind.GLOBAL_ERROR)
    return message


def classify_line(line: str, policy: MessagePolicy = DEFAULT_POLICY) -> ParsedMessage:
    """
    Classifies a single diagnostic line. Never raises; anything that does not
    look like a glslang diagnostic is MessageKind.UNKNOWN with empty fields.

    The returned views borrow from `line`.
    """
    message = _match_grammar(line)
    message = suppress(message, policy)
    return promote(message, policy)
