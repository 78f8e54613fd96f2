from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from ..parsing.message import ParsedMessage


@dataclass
class DiagnosticState:
    """
    Everything known about the watched compiler log after the last refresh.
    messages[i] is the classification of lines[i].
    """
    log_path: str = ""
    raw_output: str = ""
    lines: List[str] = field(default_factory=list)
    messages: List[ParsedMessage] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    internal_error: str = ""
    last_update: float = 0.0

    @property
    def has_errors(self) -> bool:
        """True if any line classified as an error (after promotion)."""
        return any(m.kind.is_error for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.kind.is_warning for m in self.messages)

    def pairs(self) -> Iterator[Tuple[ParsedMessage, str]]:
        return zip(self.messages, self.lines)

    def update_output(self, raw: str, lines: List[str], messages: List[ParsedMessage]):
        self.raw_output = raw
        self.lines = lines
        self.messages = messages
        self.internal_error = ""
