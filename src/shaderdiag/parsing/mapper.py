from typing import Sequence

from .message import MessageKind, ParsedMessage


def resolve_segment(message: ParsedMessage, sources: Sequence[str] = ()) -> str:
    """
    Maps a numeric segment back to the name of the source string it indexes.
    When the front end was fed several concatenated strings, glslang reports
    "0:12" for line 12 of the first one; named segments pass through as-is.
    """
    if not message.kind.has_location:
        return ""

    if message.segment.isdigit():
        index = int(message.segment.text)
        if index < len(sources):
            return sources[index]

    return message.segment.text


def format_location(message: ParsedMessage, sources: Sequence[str] = ()) -> str:
    if message.kind.has_location:
        return f"{resolve_segment(message, sources)}:{message.line_number.text}"
    # Global messages belong to the whole unit; only name it when unambiguous
    if message.kind != MessageKind.UNKNOWN and len(sources) == 1:
        return sources[0]
    return ""
