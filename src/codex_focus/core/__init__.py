from codex_focus.core.assemble import assemble_focused_code
from codex_focus.core.exceptions import FocusedCodeError, ParseFailure, UnsupportedLanguageError
from codex_focus.core.finder import FocusedCodeFinder, finder_for_document
from codex_focus.core.scope import NodeArena, collect_imports, find_scope_hierarchy

__all__ = [
    "FocusedCodeError",
    "FocusedCodeFinder",
    "NodeArena",
    "ParseFailure",
    "UnsupportedLanguageError",
    "assemble_focused_code",
    "collect_imports",
    "find_scope_hierarchy",
    "finder_for_document",
]
