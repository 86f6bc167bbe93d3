from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar, Protocol

from tree_sitter import Node

from codex_focus.core.text import collapse_whitespace
from codex_focus.models import CursorRange, NodeKind

# Truncating the context to exactly one of these would leave a dangling statement.
NON_CODE_RANGE_KINDS: frozenset[NodeKind] = frozenset({NodeKind.VARIABLE, NodeKind.CALL})

MAX_CALLEE_WIDTH = 60

SCOPE_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.TYPE,
        NodeKind.FUNCTION,
        NodeKind.VARIABLE,
        NodeKind.CLOSURE,
        NodeKind.CALL,
        NodeKind.SWITCH_CASE,
    }
)


class TextProvider(Protocol):
    def text_of(self, node: Node) -> str: ...

    def text_before(self, node: Node, child: Node) -> str: ...

    def range_of(self, node: Node) -> CursorRange: ...


@dataclass(frozen=True)
class SignatureBuilder:
    """Accumulates the parts of a signature and renders them in one pass.

    Rendered as ``"<modifiers> <keyword> <name><detail>: <supertypes>"``; empty
    parts are left out and every run of whitespace becomes a single space.
    """

    modifiers: str = ""
    keyword: str = ""
    name: str = ""
    detail: str = ""
    supertypes: str = ""

    def render(self) -> str:
        head = " ".join(part for part in (self.modifiers, self.keyword, self.name) if part)
        text = f"{head}{self.detail}"
        if self.supertypes:
            text = f"{text}: {self.supertypes}"
        return collapse_whitespace(text)


@dataclass(frozen=True)
class Classification:
    kind: NodeKind
    signature: str
    name: str
    can_be_used_as_code_range: bool = True


class LanguageClassifier:
    """Maps tree-sitter nodes of one grammar onto signatures.

    Subclasses declare ``node_kinds`` (tree-sitter node type to ``NodeKind``)
    and implement one ``classify_*`` method per kind they recognize. A method
    may return ``None`` to decline a node of a recognized type.
    """

    language: ClassVar[str]
    node_kinds: ClassVar[Mapping[str, NodeKind]]

    def kind_of(self, node: Node) -> NodeKind:
        return self.node_kinds.get(node.type, NodeKind.UNRECOGNIZED)

    def classify(self, node: Node, text: TextProvider) -> Classification | None:
        kind = self.kind_of(node)
        match kind:
            case NodeKind.TYPE:
                parts = self.classify_type(node, text)
            case NodeKind.FUNCTION:
                parts = self.classify_function(node, text)
            case NodeKind.VARIABLE:
                parts = self.classify_variable(node, text)
            case NodeKind.CLOSURE:
                parts = self.classify_closure(node, text)
            case NodeKind.CALL:
                parts = self.classify_call(node, text)
            case NodeKind.SWITCH_CASE:
                parts = self.classify_switch_case(node, text)
            case NodeKind.IMPORT | NodeKind.INCLUDE | NodeKind.UNRECOGNIZED:
                return None
        if parts is None:
            return None
        builder, name = parts
        return Classification(
            kind=kind,
            signature=builder.render(),
            name=name,
            can_be_used_as_code_range=kind not in NON_CODE_RANGE_KINDS,
        )

    def classify_type(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        return None

    def classify_function(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        return None

    def classify_variable(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        return None

    def classify_closure(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        return SignatureBuilder(keyword="closure"), "closure"

    def classify_call(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        callee = node.child_by_field_name("function")
        while callee is not None and callee.type == "parenthesized_expression" and callee.named_child_count == 1:
            callee = callee.named_children[0]
        if callee is None:
            name = ""
        elif self.kind_of(callee) is NodeKind.CLOSURE:
            # An immediately invoked closure is named by its keyword, not its body.
            closure = self.classify_closure(callee, text)
            name = closure[0].keyword if closure is not None else ""
        else:
            name = _shorten(collapse_whitespace(text.text_of(callee)))
        return SignatureBuilder(keyword="function call", name=name), "function call"

    def classify_switch_case(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        return SignatureBuilder(keyword=header_through_colon(node, text)), "switch"

    def statement_text(self, node: Node, text: TextProvider) -> str:
        """Single-line text of an import or include statement."""
        return collapse_whitespace(text.text_of(node))


def _shorten(callee: str) -> str:
    if len(callee) <= MAX_CALLEE_WIDTH:
        return callee
    return callee[: MAX_CALLEE_WIDTH - 3].rstrip() + "..."


def header_through_colon(node: Node, text: TextProvider) -> str:
    """Text of a case label up to and including its ``:``, or the whole node if it has none."""
    for child in node.children:
        if child.type == ":":
            return text.text_before(node, child) + ":"
    return text.text_of(node)


def field_text(node: Node, field_name: str, text: TextProvider) -> str:
    child = node.child_by_field_name(field_name)
    return text.text_of(child) if child is not None else ""


def joined_texts(nodes: list[Node], text: TextProvider, separator: str = ", ") -> str:
    return separator.join(text.text_of(node).strip().strip(",") for node in nodes)
