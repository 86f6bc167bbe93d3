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

_DECLARATION_SPECS = {
    "type_declaration": ("type_spec", "type_alias"),
    "var_declaration": ("var_spec",),
    "const_declaration": ("const_spec",),
}

_SPEC_KEYWORDS = {
    "type_spec": "type",
    "type_alias": "type",
    "var_spec": "var",
    "const_spec": "const",
}

_TYPE_KIND_LABELS = {
    "struct_type": "struct",
    "interface_type": "interface",
}


def _specs(declaration: Node) -> list[Node]:
    """Specs of a declaration, looking through the ``var ( ... )`` list wrapper."""
    accepted = _DECLARATION_SPECS[declaration.type]
    specs: list[Node] = []
    for child in declaration.named_children:
        if child.type in accepted:
            specs.append(child)
        elif child.type.endswith("_spec_list"):
            specs.extend(c for c in child.named_children if c.type in accepted)
    return specs


def _owning_declaration(spec: Node) -> Node | None:
    parent = spec.parent
    while parent is not None and parent.type not in _DECLARATION_SPECS:
        parent = parent.parent
    return parent


def _is_grouped(spec: Node) -> bool:
    declaration = _owning_declaration(spec)
    return declaration is not None and len(_specs(declaration)) > 1


def _result_detail(node: Node, text: TextProvider) -> str:
    detail = field_text(node, "type_parameters", text) + field_text(node, "parameters", text)
    result = field_text(node, "result", text)
    if result:
        detail = f"{detail} {result}"
    return detail


class GoClassifier(LanguageClassifier):
    language = "go"
    node_kinds = {
        "function_declaration": NodeKind.FUNCTION,
        "method_declaration": NodeKind.FUNCTION,
        "type_declaration": NodeKind.TYPE,
        "type_spec": NodeKind.TYPE,
        "type_alias": NodeKind.TYPE,
        "var_declaration": NodeKind.VARIABLE,
        "var_spec": NodeKind.VARIABLE,
        "const_declaration": NodeKind.VARIABLE,
        "const_spec": NodeKind.VARIABLE,
        "short_var_declaration": NodeKind.VARIABLE,
        "func_literal": NodeKind.CLOSURE,
        "call_expression": NodeKind.CALL,
        "expression_case": NodeKind.SWITCH_CASE,
        "type_case": NodeKind.SWITCH_CASE,
        "default_case": NodeKind.SWITCH_CASE,
        "communication_case": NodeKind.SWITCH_CASE,
        "import_declaration": NodeKind.IMPORT,
    }

    def _single_spec(self, node: Node) -> Node | None:
        """The spec to describe ``node`` by, or None when another node describes it.

        A declaration holding exactly one spec is described as a whole, so its
        range includes the keyword; grouped declarations are described per spec.
        """
        if node.type in _DECLARATION_SPECS:
            specs = _specs(node)
            return specs[0] if len(specs) == 1 else None
        return node if _is_grouped(node) else None

    def classify_type(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        spec = self._single_spec(node)
        if spec is None:
            return None
        name = field_text(spec, "name", text)
        type_node = spec.child_by_field_name("type")
        detail = field_text(spec, "type_parameters", text)
        supertypes = ""
        if spec.type == "type_alias":
            detail = f"{detail} = {field_text(spec, 'type', text)}"
        elif type_node is not None:
            label = _TYPE_KIND_LABELS.get(type_node.type)
            detail = f"{detail} {label or text.text_of(type_node)}"
            if type_node.type == "struct_type":
                supertypes = joined_texts(_embedded_fields(type_node), text)
        return SignatureBuilder(keyword="type", name=name, detail=detail, supertypes=supertypes), name

    def classify_function(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        name = field_text(node, "name", text)
        keyword = "func"
        receiver = field_text(node, "receiver", text)
        if receiver:
            keyword = f"func {receiver}"
        return SignatureBuilder(keyword=keyword, name=name, detail=_result_detail(node, text)), name

    def classify_variable(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        if node.type == "short_var_declaration":
            name = collapse_whitespace(field_text(node, "left", text))
            return SignatureBuilder(name=name), name

        spec = self._single_spec(node)
        if spec is None:
            return None
        name = ", ".join(text.text_of(n) for n in spec.children_by_field_name("name"))
        declared_type = field_text(spec, "type", text)
        detail = f" {declared_type}" if declared_type else ""
        return SignatureBuilder(keyword=_SPEC_KEYWORDS[spec.type], name=name, detail=detail), name

    def classify_closure(self, node: Node, text: TextProvider) -> tuple[SignatureBuilder, str] | None:
        return SignatureBuilder(keyword="func", detail=_result_detail(node, text)), "closure"


def _embedded_fields(struct_type: Node) -> list[Node]:
    embedded: list[Node] = []
    for field_list in struct_type.named_children:
        if field_list.type != "field_declaration_list":
            continue
        for declaration in field_list.named_children:
            if declaration.type != "field_declaration" or declaration.child_by_field_name("name") is not None:
                continue
            type_node = declaration.child_by_field_name("type")
            if type_node is not None:
                embedded.append(type_node)
    return embedded
