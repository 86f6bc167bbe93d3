"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from codex_focus.core.text import SourceLocationConverter
from codex_focus.models import CursorRange, Document

_REPO_ROOT = Path(__file__).parent.parent

CURSOR_MARKER = "<|>"


# ---------------------------------------------------------------------------
# Auto-marker: tag every test under tests/unit as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


@pytest.fixture
def python_parser() -> Parser:
    """Return a tree-sitter parser for Python."""
    return get_parser("python")


@pytest.fixture
def go_parser() -> Parser:
    """Return a tree-sitter parser for Go."""
    return get_parser("go")


@pytest.fixture
def c_parser() -> Parser:
    """Return a tree-sitter parser for C."""
    return get_parser("c")


# ---------------------------------------------------------------------------
# Source helpers
# ---------------------------------------------------------------------------


def _split_cursor(source: str, uri: str = "") -> tuple[Document, CursorRange]:
    """Remove the ``<|>`` marker from ``source`` and return the document and cursor at its place."""
    offset = source.index(CURSOR_MARKER)
    before = source[:offset]
    line = before.count("\n")
    character = len(before) - (before.rfind("\n") + 1)
    document = Document.from_text(source.replace(CURSOR_MARKER, "", 1), uri=uri)
    return document, CursorRange.at(line, character)


def _find_nodes(root: Node, node_type: str) -> list[Node]:
    found: list[Node] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            found.append(node)
        stack.extend(reversed(node.children))
    return found


@pytest.fixture
def split_cursor() -> Callable[..., tuple[Document, CursorRange]]:
    return _split_cursor


@pytest.fixture
def parse_nodes() -> Callable[[Parser, str, str], tuple[list[Node], SourceLocationConverter]]:
    """Parse source and return every node of one type plus a converter for the document."""

    def _parse(parser: Parser, source: str, node_type: str) -> tuple[list[Node], SourceLocationConverter]:
        tree = parser.parse(source.encode("utf-8"))
        return _find_nodes(tree.root_node, node_type), SourceLocationConverter(Document.from_text(source))

    return _parse
