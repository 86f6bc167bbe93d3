from tree_sitter import Node

from codex_focus.core.classify.base import LanguageClassifier, SignatureBuilder, TextProvider, field_text
from codex_focus.models import NodeKind

_MODIFIER_TYPES = ("storage_class_specifier", "type_qualifier")

_WRAPPING_DECLARATORS = (
    "pointer_declarator",
    "init_declarator",
    "array_declarator",
    "parenthesized_declarator",
    "attributed_declarator",
)


def _modifiers(node: Node, text: TextProvider) -> str:
    return " ".join(text.text_of(child) for child in node.children if child.type in _MODIFIER_TYPES)


def _unwrap_declarator(declarator: Node) -> tuple[Node, str, Node | None]:
    """Return (identifier, pointer stars, parameter list) of a possibly nested declarator."""
    stars = ""
    parameters: Node | None = None
    current = declarator
    while True:
        if current.type == "pointer_declarator":
            stars += "*"
        if current.type == "function_declarator" and parameters is None:
            parameters = current.child_by_field_name("parameters")
        elif current.type not in _WRAPPING_DECLARATORS:
            return current, stars, parameters
        inner = current.child_by_field_name("declarator")
        if inner is None:
            inner = next((c for c in current.named_children if c.type != "attribute_specifier"), None)
        if inner is None:
            return current, stars, parameters
        current = inner


class CClassifier(LanguageClassifier):
    language = "c"
    node_kinds = {
        "function_definition": NodeKind.FUNCTION,
        "struct_specifier": NodeKind.TYPE,
        "union_specifier": NodeKind.TYPE,
        "enum_specifier": NodeKind.TYPE,
        "type_definition": NodeKind.TYPE,
        "declaration": NodeKind.VARIABLE,
        "call_expression": NodeKind.CALL,
        "case_statement": NodeKind.SWITCH_CASE,
        "preproc_include": NodeKind.INCLUDE,
    }

    def classify_type(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        if node.type == "type_definition":
            names = [_unwrap_declarator(d)[0] for d in node.children_by_field_name("declarator")]
            name = ", ".join(text.text_of(n) for n in names)
            underlying = node.child_by_field_name("type")
            keyword = "typedef"
            if underlying is not None:
                if underlying.child_by_field_name("body") is not None:
                    keyword = f"typedef {underlying.type.removesuffix('_specifier')}"
                else:
                    keyword = f"typedef {text.text_of(underlying)}"
            return SignatureBuilder(keyword=keyword, name=name), name

        if node.child_by_field_name("body") is None:
            return None
        keyword = node.type.removesuffix("_specifier")
        name = field_text(node, "name", text)
        return SignatureBuilder(keyword=keyword, name=name), name or keyword

    def classify_function(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        declarator = node.child_by_field_name("declarator")
        if declarator is None:
            return None
        identifier, stars, parameters = _unwrap_declarator(declarator)
        name = text.text_of(identifier)
        builder = SignatureBuilder(
            modifiers=_modifiers(node, text),
            keyword=field_text(node, "type", text) + stars,
            name=name,
            detail=text.text_of(parameters) if parameters is not None else "",
        )
        return builder, name

    def classify_variable(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        declarators = [_unwrap_declarator(d) for d in node.children_by_field_name("declarator")]
        if not declarators:
            return None
        name = ", ".join(text.text_of(identifier) for identifier, _, _ in declarators)
        detail = ""
        if len(declarators) == 1 and declarators[0][2] is not None:
            detail = text.text_of(declarators[0][2])
        builder = SignatureBuilder(
            modifiers=_modifiers(node, text),
            keyword=field_text(node, "type", text) + (declarators[0][1] if len(declarators) == 1 else ""),
            name=name,
            detail=detail,
        )
        return builder, name
