"""Line buffer with indentation, used to build the text report (internal)."""

from typing import List

_PAD = "  "


class Indenter:
    def __init__(self):
        self.lines: List[str] = []
        self.depth = 0

    def indent(self) -> "Indenter":
        self.depth += 1
        return self

    def dedent(self) -> "Indenter":
        self.depth = max(self.depth - 1, 0)
        return self

    def _padding(self) -> str:
        return _PAD * self.depth

    def add(self, chunk: "Indenter") -> "Indenter":
        """Append the lines of another Indenter at the current depth."""
        for line in chunk.lines:
            self.lines.append(self._padding() + line)
        return self

    def add_line(self, text: str = "") -> "Indenter":
        for line in text.split("\n"):
            self.lines.append(self._padding() + line)
        return self

    def empty(self) -> bool:
        return all(not line.strip() for line in self.lines)

    def __str__(self) -> str:
        # blank lines carry no padding
        return "\n".join(line if line.strip() else "" for line in self.lines)
