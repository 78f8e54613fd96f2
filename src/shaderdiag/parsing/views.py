"""
Borrowed slices into a diagnostic line.
A TextView never copies its source; the text is only materialized when asked for.
"""


class TextView:
    __slots__ = ("source", "start", "end")

    def __init__(self, source: str = "", start: int = 0, end: int = 0):
        self.source = source
        self.start = start
        self.end = end

    @classmethod
    def empty(cls) -> "TextView":
        return cls()

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def __bool__(self) -> bool:
        return self.end > self.start

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"TextView({self.text!r}, start={self.start}, end={self.end})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TextView):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)

    def isdigit(self) -> bool:
        # ASCII only; str.isdigit() also accepts superscripts
        return bool(self) and all("0" <= c <= "9" for c in self.text)

