import logging
from pathlib import Path

from codex_focus.config import clamp_max_lines, get_max_focused_lines
from codex_focus.core.assemble import assemble_focused_code
from codex_focus.core.classify import LanguageClassifier, get_classifier
from codex_focus.core.exceptions import ParseFailure
from codex_focus.core.languages import normalize_language, resolve_language
from codex_focus.core.parser import parse_document
from codex_focus.core.scope import NodeArena, collect_imports, find_scope_hierarchy
from codex_focus.core.text import SourceLocationConverter
from codex_focus.models import ContextInfo, CursorRange, Document, FocusedCode

logger = logging.getLogger(__name__)


class FocusedCodeFinder:
    """Extracts the focused code around a cursor for one language.

    Holds no per-document state, so one instance may serve concurrent calls as
    long as each call is given its own document.
    """

    def __init__(self, language: str, max_focused_code_line_count: int | None = None) -> None:
        self.language = normalize_language(language)
        self.classifier: LanguageClassifier = get_classifier(self.language)
        if max_focused_code_line_count is None:
            max_focused_code_line_count = get_max_focused_lines()
        self.max_focused_code_line_count = clamp_max_lines(max_focused_code_line_count)

    def collect_context(self, document: Document, target: CursorRange) -> ContextInfo:
        """Return the scope chain and imports around ``target``, or an empty context if parsing fails."""
        try:
            tree = parse_document(document, self.language)
        except ParseFailure as exc:
            logger.warning("No structural context for %s: %s", document.uri or "<buffer>", exc)
            return ContextInfo.empty()

        converter = SourceLocationConverter(document)
        clamped = converter.clamp(target)
        arena = NodeArena()
        nodes = find_scope_hierarchy(tree.root_node, clamped, converter, self.classifier, arena)
        imports, includes = collect_imports(tree.root_node, converter, self.classifier)
        logger.debug("Found %d scope(s) and %d import(s) in %s", len(nodes), len(imports), document.uri or "<buffer>")
        return ContextInfo(nodes=nodes, includes=includes, imports=imports)

    def extract(self, document: Document, target: CursorRange, max_lines: int | None = None) -> FocusedCode:
        budget = self.max_focused_code_line_count if max_lines is None else clamp_max_lines(max_lines)
        context = self.collect_context(document, target)
        clamped = SourceLocationConverter(document).clamp(target)
        return assemble_focused_code(context, document, clamped, budget)


def finder_for_document(
    document: Document,
    language: str | None = None,
    max_focused_code_line_count: int | None = None,
) -> FocusedCodeFinder:
    file_path = Path(document.uri) if document.uri else None
    return FocusedCodeFinder(resolve_language(language, file_path), max_focused_code_line_count)
