"""Line splitting and tree-sitter location conversion for a single document."""

from tree_sitter import Node

from codex_focus.models import CursorRange, Document, Position


def split_lines(content: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings, so rows line up with tree-sitter points."""
    if not content:
        return []
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _strip_line_ending(line: str) -> str:
    return line.rstrip("\r\n")


def code_in_range(lines: tuple[str, ...] | list[str], cursor_range: CursorRange) -> str:
    start, end = cursor_range.start, cursor_range.end
    if start.line >= len(lines) or cursor_range.is_empty:
        return ""
    if start.line == end.line:
        return lines[start.line][start.character : end.character]
    parts = [lines[start.line][start.character :]]
    parts.extend(lines[start.line + 1 : min(end.line, len(lines))])
    if end.line < len(lines):
        parts.append(lines[end.line][: end.character])
    return "".join(parts)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


class SourceLocationConverter:
    """Converts tree-sitter byte points into character-based ranges of one document."""

    def __init__(self, document: Document) -> None:
        self._document = document
        self._encoded = [line.encode("utf-8") for line in document.lines]

    @property
    def document(self) -> Document:
        return self._document

    def position(self, point: tuple[int, int]) -> Position:
        row, column = point
        if row >= len(self._encoded):
            return Position(line=row, character=0)
        prefix = self._encoded[row][:column]
        return Position(line=row, character=len(prefix.decode("utf-8", errors="ignore")))

    def range_of(self, node: Node) -> CursorRange:
        return CursorRange(
            start=self.position((node.start_point[0], node.start_point[1])),
            end=self.position((node.end_point[0], node.end_point[1])),
        )

    def text_of(self, node: Node) -> str:
        return code_in_range(self._document.lines, self.range_of(node))

    def text_before(self, node: Node, child: Node) -> str:
        """Text of ``node`` that precedes ``child``, e.g. a declaration header before its body."""
        start = self.range_of(node).start
        end = self.range_of(child).start
        return code_in_range(self._document.lines, CursorRange(start=start, end=max(start, end, key=Position.as_tuple)))

    def clamp(self, cursor_range: CursorRange) -> CursorRange:
        """Move a range that points past the document back onto the nearest valid position."""
        start = self._clamp_position(cursor_range.start)
        end = self._clamp_position(cursor_range.end)
        return CursorRange(start=start, end=max(start, end, key=Position.as_tuple))

    def _clamp_position(self, position: Position) -> Position:
        lines = self._document.lines
        if not lines:
            return Position(line=0, character=0)
        if position.line >= len(lines):
            last = len(lines) - 1
            return Position(line=last, character=len(_strip_line_ending(lines[last])))
        width = len(_strip_line_ending(lines[position.line]))
        return Position(line=position.line, character=min(position.character, width))
