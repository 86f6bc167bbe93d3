from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)

    def as_tuple(self) -> tuple[int, int]:
        return (self.line, self.character)

    def __lt__(self, other: "Position") -> bool:
        return self.as_tuple() < other.as_tuple()

    def __le__(self, other: "Position") -> bool:
        return self.as_tuple() <= other.as_tuple()


class CursorRange(BaseModel):
    """Zero-based range, half-open on the character offset of ``end``."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @model_validator(mode="after")
    def _check_order(self) -> "CursorRange":
        if self.end < self.start:
            raise ValueError(f"Range end {self.end.as_tuple()} precedes start {self.start.as_tuple()}")
        return self

    @classmethod
    def at(cls, line: int, character: int) -> "CursorRange":
        position = Position(line=line, character=character)
        return cls(start=position, end=position)

    @classmethod
    def between(cls, start: tuple[int, int], end: tuple[int, int]) -> "CursorRange":
        return cls(
            start=Position(line=start[0], character=start[1]),
            end=Position(line=end[0], character=end[1]),
        )

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def line_count(self) -> int:
        return self.end.line - self.start.line + 1

    def contains(self, other: "CursorRange") -> bool:
        """Inclusive containment, so a cursor sitting on either boundary is inside."""
        return self.start <= other.start and other.end <= self.end

    def strictly_contains(self, other: "CursorRange") -> bool:
        return self.contains(other) and self != other


class Document(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    lines: tuple[str, ...]
    uri: str = ""

    @classmethod
    def from_text(cls, content: str, uri: str = "") -> "Document":
        from codex_focus.core.text import split_lines

        return cls(content=content, lines=tuple(split_lines(content)), uri=uri)


class NodeKind(StrEnum):
    TYPE = "type"
    FUNCTION = "function"
    VARIABLE = "variable"
    CLOSURE = "closure"
    CALL = "call"
    SWITCH_CASE = "switch_case"
    IMPORT = "import"
    INCLUDE = "include"
    UNRECOGNIZED = "unrecognized"


class ContextNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    handle: int
    kind: NodeKind
    signature: str
    name: str
    can_be_used_as_code_range: bool = True
    range: CursorRange


class ContextInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes: list[ContextNode] = Field(default_factory=list)
    includes: list[str] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "ContextInfo":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.nodes or self.includes or self.imports)


class ScopeSignature(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str
    name: str
    range: CursorRange


class FocusedCode(BaseModel):
    model_config = ConfigDict(frozen=True)

    context: ContextInfo
    scope_signatures: list[ScopeSignature] = Field(default_factory=list)
    code: str
    code_range: CursorRange
    focused_range: CursorRange
    truncated: bool = False

    def lines(self) -> list[str]:
        """Breadcrumb signatures followed by the focused code, one entry per output line."""
        code_lines = self.code.split("\n") if self.code else []
        return [scope.signature for scope in self.scope_signatures] + code_lines

    @property
    def line_count(self) -> int:
        return len(self.lines())

    def render(self) -> str:
        return "\n".join(self.lines())
