"""Scope hierarchy walking over a tree-sitter tree."""

from dataclasses import dataclass, field

from tree_sitter import Node

from codex_focus.core.classify import SCOPE_KINDS, LanguageClassifier, TextProvider
from codex_focus.models import ContextNode, CursorRange, NodeKind


@dataclass
class NodeArena:
    """Per-call store of tree nodes; a ``ContextNode.handle`` is an index into it.

    Handles are only valid while the tree that produced them is alive, so an
    arena must not outlive the extraction call that filled it.
    """

    nodes: list[Node] = field(default_factory=list)

    def add(self, node: Node) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def resolve(self, handle: int) -> Node:
        return self.nodes[handle]


def _enclosing_child(node: Node, target: CursorRange, text: TextProvider) -> Node | None:
    best: Node | None = None
    best_span = 0
    for child in node.children:
        if not text.range_of(child).contains(target):
            continue
        span = child.end_byte - child.start_byte
        if best is None or span < best_span:
            best, best_span = child, span
    return best


def find_scope_hierarchy(
    root: Node,
    target: CursorRange,
    text: TextProvider,
    classifier: LanguageClassifier,
    arena: NodeArena | None = None,
) -> list[ContextNode]:
    """Return the recognized nodes enclosing ``target``, outermost first.

    Descends from ``root`` into the child containing ``target`` until no child
    contains it. Among several containing children the smallest wins.
    """
    arena = arena if arena is not None else NodeArena()
    chain: list[ContextNode] = []
    current: Node | None = root
    while current is not None:
        classification = classifier.classify(current, text)
        if classification is not None:
            context_node = ContextNode(
                handle=arena.add(current),
                kind=classification.kind,
                signature=classification.signature,
                name=classification.name,
                can_be_used_as_code_range=classification.can_be_used_as_code_range,
                range=text.range_of(current),
            )
            # Same span as the enclosing entry: keep the more specific node.
            if chain and chain[-1].range == context_node.range:
                chain[-1] = context_node
            else:
                chain.append(context_node)
        current = _enclosing_child(current, target, text)
    return chain


def collect_imports(
    root: Node,
    text: TextProvider,
    classifier: LanguageClassifier,
) -> tuple[list[str], list[str]]:
    """Return (imports, includes) found at file scope, in document order.

    Statement containers such as ``if`` blocks and preprocessor conditionals are
    searched; declarations, closures and calls are not entered.
    """
    imports: list[str] = []
    includes: list[str] = []
    stack = [root]
    while stack:
        node = stack.pop()
        kind = classifier.kind_of(node)
        if kind is NodeKind.IMPORT:
            imports.append(classifier.statement_text(node, text))
            continue
        if kind is NodeKind.INCLUDE:
            includes.append(classifier.statement_text(node, text))
            continue
        if kind in SCOPE_KINDS and node is not root:
            continue
        stack.extend(reversed(node.children))
    return imports, includes
