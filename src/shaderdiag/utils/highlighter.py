from typing import Iterable, Sequence, Tuple

from rich.text import Text

from ..parsing.mapper import format_location
from ..parsing.message import MessageKind, ParsedMessage

SEVERITY_STYLES = {
    "error": "bold red",
    "warning": "bold yellow",
}
LOCATION_STYLE = "cyan"


def severity_tag(kind: MessageKind) -> str:
    if kind.is_error:
        return "error"
    if kind.is_warning:
        return "warning"
    return ""


def render_message(message: ParsedMessage, raw_line: str, sources: Sequence[str] = ()) -> Text:
    """
    Build a Rich Text for one classified line.

    Located and global diagnostics are shown as
        <location>: <severity>: <body>
    with the location dropped when there is none to show. The body is
    never rewritten. Unknown lines are passed through verbatim.
    """
    tag = severity_tag(message.kind)
    if not tag:
        return Text(raw_line)

    text = Text()
    location = format_location(message, sources)
    if location:
        text.append(location, style=LOCATION_STYLE)
        text.append(": ")
    text.append(f"{tag}:", style=SEVERITY_STYLES[tag])
    text.append(" ")
    text.append(message.body.text)
    return text


def render_output(pairs: Iterable[Tuple[ParsedMessage, str]], sources: Sequence[str] = ()) -> Text:
    """Join rendered lines for a whole log into one renderable."""
    return Text("\n").join(render_message(msg, raw, sources) for msg, raw in pairs)
