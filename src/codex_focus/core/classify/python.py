from tree_sitter import Node

from codex_focus.core.classify.base import (
    LanguageClassifier,
    SignatureBuilder,
    TextProvider,
    field_text,
    joined_texts,
)
from codex_focus.core.text import collapse_whitespace
from codex_focus.models import NodeKind


def _decorators(node: Node, text: TextProvider) -> list[str]:
    parent = node.parent
    if parent is None or parent.type != "decorated_definition":
        return []
    return [text.text_of(child) for child in parent.children if child.type == "decorator"]


class PythonClassifier(LanguageClassifier):
    language = "python"
    node_kinds = {
        "class_definition": NodeKind.TYPE,
        "function_definition": NodeKind.FUNCTION,
        "assignment": NodeKind.VARIABLE,
        "lambda": NodeKind.CLOSURE,
        "call": NodeKind.CALL,
        "case_clause": NodeKind.SWITCH_CASE,
        "import_statement": NodeKind.IMPORT,
        "import_from_statement": NodeKind.IMPORT,
        "future_import_statement": NodeKind.IMPORT,
    }

    def classify_type(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        name = field_text(node, "name", text)
        superclasses = node.child_by_field_name("superclasses")
        supertypes = ""
        if superclasses is not None:
            supertypes = joined_texts([c for c in superclasses.named_children if c.type != "comment"], text)
        builder = SignatureBuilder(
            modifiers=" ".join(_decorators(node, text)),
            keyword="class",
            name=name,
            detail=field_text(node, "type_parameters", text),
            supertypes=supertypes,
        )
        return builder, name

    def classify_function(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        name = field_text(node, "name", text)
        modifiers = _decorators(node, text)
        if any(child.type == "async" for child in node.children):
            modifiers.append("async")

        detail = field_text(node, "type_parameters", text) + field_text(node, "parameters", text)
        return_type = field_text(node, "return_type", text)
        if return_type:
            detail = f"{detail} -> {return_type}"

        builder = SignatureBuilder(modifiers=" ".join(modifiers), keyword="def", name=name, detail=detail)
        return builder, name

    def classify_variable(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        name = collapse_whitespace(field_text(node, "left", text))
        annotation = field_text(node, "type", text)
        detail = f": {annotation}" if annotation else ""
        return SignatureBuilder(name=name, detail=detail), name

    def classify_closure(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        parameters = field_text(node, "parameters", text)
        return SignatureBuilder(keyword="lambda", name=parameters), "closure"
