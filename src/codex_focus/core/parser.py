import logging
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from codex_focus.core.exceptions import ParseFailure
from codex_focus.core.languages import normalize_language
from codex_focus.models import Document

logger = logging.getLogger(__name__)


def _opens_with_error(root: Node) -> bool:
    """True when the first construct of the file is, or sits inside, an ``ERROR`` node.

    Grammars always return their own root type, so unreadable input shows up as
    an ``ERROR`` child. Errors after a well-formed opening are left to the walker.
    """
    first = next((child for child in root.named_children if child.type != "comment"), None)
    if first is None:
        return False
    node: Node | None = root.descendant_for_byte_range(first.start_byte, first.start_byte)
    while node is not None and node != root:
        if node.type == "ERROR" or node.is_missing:
            return True
        node = node.parent
    return False


def parse_source(source: str, language: str) -> Tree:
    """Parse ``source`` with the tree-sitter grammar for ``language``.

    Syntax errors inside an otherwise well-formed file are tolerated, since code
    being edited is rarely complete. The parse fails when the parser itself
    raises or when the file does not open with anything the grammar recognizes.
    """
    resolved = normalize_language(language)
    try:
        parser = get_parser(cast(SupportedLanguage, resolved))
        tree = parser.parse(source.encode("utf-8"))
    except Exception as exc:
        raise ParseFailure(resolved, str(exc)) from exc

    if tree is None:
        raise ParseFailure(resolved, "parser returned no tree")
    if tree.root_node.type == "ERROR" or _opens_with_error(tree.root_node):
        raise ParseFailure(resolved, "source does not start with a recognizable construct")
    if tree.root_node.has_error:
        logger.debug("Parsed %s source with syntax errors", resolved)
    return tree


def parse_document(document: Document, language: str) -> Tree:
    return parse_source(document.content, language)
