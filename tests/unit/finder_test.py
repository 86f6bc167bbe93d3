"""End-to-end tests for the focused code finder."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from codex_focus.core.exceptions import ParseFailure, UnsupportedLanguageError
from codex_focus.core.finder import FocusedCodeFinder, finder_for_document
from codex_focus.models import CursorRange, Document

FOO_BAR = """import os

class Foo:
    def bar(self):
        value = os.getcwd()
        <|>return value
"""


class TestScenarios:
    def test_cursor_inside_method_body(self, split_cursor: Callable[..., Any]) -> None:
        document, target = split_cursor(FOO_BAR, "foo.py")
        focused = FocusedCodeFinder("python", 60).extract(document, target)

        assert [node.signature for node in focused.context.nodes] == ["class Foo", "def bar(self)"]
        assert focused.context.imports == ["import os"]
        assert [scope.signature for scope in focused.scope_signatures] == ["class Foo"]
        assert focused.code == "    def bar(self):\n        value = os.getcwd()\n        return value"
        assert focused.truncated is False

    def test_budget_of_one_line_keeps_innermost_signature_and_one_window_line(
        self, split_cursor: Callable[..., Any]
    ) -> None:
        document, target = split_cursor(FOO_BAR)
        focused = FocusedCodeFinder("python").extract(document, target, max_lines=1)

        assert [scope.signature for scope in focused.scope_signatures] == ["def bar(self)"]
        assert focused.code == "        return value"
        assert focused.truncated is True

    def test_cursor_between_siblings_stops_at_container(self, split_cursor: Callable[..., Any]) -> None:
        source = "class Foo:\n    def a(self):\n        return 1\n<|>\n    def b(self):\n        return 2\n"
        document, target = split_cursor(source)
        focused = FocusedCodeFinder("python").extract(document, target)

        assert [node.name for node in focused.context.nodes] == ["Foo"]
        assert focused.code_range.start.line == 0
        assert focused.code_range.end.line == 5

    @pytest.mark.parametrize("language", ["python", "go", "c"])
    @pytest.mark.parametrize(
        ("source", "cursor"),
        [
            (")))) ]]]] ))))", 4),
            ("}}} foo(bar) {{{", 12),
            ("def (((( foo(x) ]]]] class", 14),
        ],
        ids=["brackets", "call-between-braces", "keywords-and-call"],
    )
    def test_unparsable_source_yields_empty_context(self, language: str, source: str, cursor: int) -> None:
        document = Document.from_text(source)
        context = FocusedCodeFinder(language).collect_context(document, CursorRange.at(0, cursor))
        assert context.nodes == []
        assert context.includes == []
        assert context.imports == []

    def test_syntax_error_after_valid_code_is_tolerated(self, split_cursor: Callable[..., Any]) -> None:
        source = "import os\n\ndef run():\n    return os.get<|>cwd()\n\n)))\n"
        document, target = split_cursor(source)
        context = FocusedCodeFinder("python").collect_context(document, target)
        assert [node.signature for node in context.nodes] == ["def run()", "function call os.getcwd"]
        assert context.imports == ["import os"]


class TestParseFailure:
    def test_failure_is_logged_and_degrades_to_line_window(
        self,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        def _fail(*_: Any) -> None:
            raise ParseFailure("python", "boom")

        monkeypatch.setattr("codex_focus.core.finder.parse_document", _fail)
        document = Document.from_text("".join(f"x{i} = {i}\n" for i in range(10)), uri="broken.py")

        with caplog.at_level(logging.WARNING, logger="codex_focus.core.finder"):
            focused = FocusedCodeFinder("python").extract(document, CursorRange.at(5, 0), max_lines=3)

        assert focused.context.is_empty
        assert focused.code == "x4 = 4\nx5 = 5\nx6 = 6"
        assert "broken.py" in caplog.text


class TestProperties:
    def test_signatures_are_single_line(self, split_cursor: Callable[..., Any]) -> None:
        source = (
            "@decorate(\n    option=True,\n)\nclass Service(\n    Base,\n    Mixin,\n):\n"
            "    def handle(\n        self,\n        request,\n    ) -> Response:\n        return <|>request\n"
        )
        document, target = split_cursor(source)
        context = FocusedCodeFinder("python").collect_context(document, target)
        assert len(context.nodes) == 2
        for node in context.nodes:
            assert "\n" not in node.signature
            assert "\r" not in node.signature

    def test_results_are_idempotent(self, split_cursor: Callable[..., Any]) -> None:
        document, target = split_cursor(FOO_BAR)
        finder = FocusedCodeFinder("python", 5)
        first = finder.extract(document, target)
        second = finder.extract(document, target)
        assert first.model_dump_json() == second.model_dump_json()

    def test_reordering_unrelated_siblings_keeps_the_chain(self, split_cursor: Callable[..., Any]) -> None:
        target_func = "func Target() {\n\tcall(<|>1)\n}\n"
        helper_a = "func HelperA() {\n\treturn\n}\n"
        helper_b = "type B struct{}\n"
        finder = FocusedCodeFinder("go")

        chains = []
        for parts in ([helper_a, target_func, helper_b], [helper_b, helper_a, target_func], [target_func, helper_b]):
            document, target = split_cursor("package main\n\n" + "\n".join(parts))
            context = finder.collect_context(document, target)
            chains.append([(node.kind, node.signature, node.name) for node in context.nodes])

        assert chains[0] == chains[1] == chains[2]
        assert [signature for _, signature, _ in chains[0]] == ["func Target()", "function call call"]

    def test_out_of_bounds_target_is_clamped(self) -> None:
        document = Document.from_text("def run():\n    return 1\n")
        focused = FocusedCodeFinder("python").extract(document, CursorRange.at(40, 9))
        assert [node.name for node in focused.context.nodes] == ["run"]
        assert focused.focused_range == CursorRange.at(1, 12)

    def test_concurrent_extractions_match_sequential_results(self, split_cursor: Callable[..., Any]) -> None:
        finder = FocusedCodeFinder("python", 4)
        requests = []
        for name in ("alpha", "beta", "gamma", "delta"):
            source = f"class {name.title()}:\n    def {name}(self):\n        <|>return '{name}'\n"
            requests.append(split_cursor(source))

        expected = [finder.extract(document, target).model_dump_json() for document, target in requests]
        with ThreadPoolExecutor(max_workers=4) as pool:
            actual = list(pool.map(lambda request: finder.extract(*request).model_dump_json(), requests))
        assert actual == expected


class TestLanguages:
    def test_go_document(self, split_cursor: Callable[..., Any]) -> None:
        source = (
            'package main\n\nimport "fmt"\n\nfunc main() {\n\thandler := func(name string) {\n'
            "\t\tfmt.Println(<|>name)\n\t}\n\thandler(\"x\")\n}\n"
        )
        document, target = split_cursor(source, "main.go")
        focused = finder_for_document(document).extract(document, target)
        assert [node.signature for node in focused.context.nodes] == [
            "func main()",
            "handler",
            "func(name string)",
            "function call fmt.Println",
        ]
        assert [scope.signature for scope in focused.scope_signatures] == ["func main()", "handler"]
        assert focused.code == "\thandler := func(name string) {\n\t\tfmt.Println(name)\n\t}"

    def test_c_document(self, split_cursor: Callable[..., Any]) -> None:
        source = (
            "#include <stdio.h>\n\nstatic int add(int a, int b) {\n    int total = a + b;\n"
            "    printf(\"%d\", <|>total);\n    return total;\n}\n"
        )
        document, target = split_cursor(source, "add.c")
        focused = finder_for_document(document).extract(document, target)
        assert focused.context.includes == ["#include <stdio.h>"]
        assert [node.signature for node in focused.context.nodes] == [
            "static int add(int a, int b)",
            "function call printf",
        ]
        assert focused.code.startswith("static int add(int a, int b) {")

    def test_language_override_beats_extension(self) -> None:
        document = Document.from_text("x = 1\n", uri="script.txt")
        assert finder_for_document(document, language="py").language == "python"

    def test_unknown_extension_is_rejected(self) -> None:
        with pytest.raises(UnsupportedLanguageError):
            finder_for_document(Document.from_text("", uri="notes.txt"))

    def test_default_budget_comes_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODEX_FOCUS_MAX_LINES", "7")
        assert FocusedCodeFinder("go").max_focused_code_line_count == 7
