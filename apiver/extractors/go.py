"""Go signature extractor built on tree-sitter-go."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node

from ..models import Category
from .tree_sitter import Symbol, TreeSitterExtractor, node_text, normalize

_METHOD_ELEMENTS = {"method_elem", "method_spec"}


class GoExtractor(TreeSitterExtractor):
    """Extracts exported functions, variables, constants and types from Go packages.

    Each directory holding ``.go`` files is treated as one package. Test files
    are ignored. Descriptors follow Go's own rendering closely enough that a
    changed parameter list, result type or constant value produces a new
    descriptor:

    * ``func Name(params) result``
    * ``func (*Type) Name(params) result`` for methods of exported types and
      for the methods of exported interfaces
    * ``var Name Type`` and ``type Name Underlying``
    * ``const Name Type = value``
    * ``struct Name { Field Type, ... }`` (exported fields only)
    * ``interface Name``
    """

    name = "go"
    suffixes = (".go",)

    def language(self) -> Language:
        return Language(tree_sitter_go.language())

    def accepts(self, filename: str) -> bool:
        return filename.endswith(".go") and not filename.endswith("_test.go")

    def collect(self, root: Node, source: bytes) -> Iterable[Symbol]:
        for node in root.named_children:
            if node.type == "function_declaration":
                yield from self._function(node, source)
            elif node.type == "method_declaration":
                yield from self._method(node, source)
            elif node.type == "type_declaration":
                yield from self._types(node, source)
            elif node.type == "const_declaration":
                yield from self._constants(node, source)
            elif node.type == "var_declaration":
                yield from self._variables(node, source)

    # ------------------------------------------------------------------
    # Declarations

    def _function(self, node: Node, source: bytes) -> Iterator[Symbol]:
        name = node_text(node.child_by_field_name("name"), source)
        if not is_exported(name):
            return
        type_parameters = node_text(node.child_by_field_name("type_parameters"), source)
        yield Category.FUNCTIONS, normalize(
            f"func {name}{type_parameters}{_callable(node, source)}"
        )

    def _method(self, node: Node, source: bytes) -> Iterator[Symbol]:
        name = node_text(node.child_by_field_name("name"), source)
        receiver = _receiver_type(node.child_by_field_name("receiver"), source)
        if not is_exported(name) or not is_exported(_base_type_name(receiver)):
            return
        yield Category.FUNCTIONS, normalize(
            f"func ({receiver}) {name}{_callable(node, source)}"
        )

    def _types(self, node: Node, source: bytes) -> Iterator[Symbol]:
        for spec in _specs(node, {"type_spec", "type_alias"}):
            name = node_text(spec.child_by_field_name("name"), source)
            if not is_exported(name):
                continue
            type_parameters = node_text(spec.child_by_field_name("type_parameters"), source)
            type_node = spec.child_by_field_name("type")
            if spec.type == "type_alias":
                yield Category.FIELDS, normalize(
                    f"type {name} = {node_text(type_node, source)}"
                )
            elif type_node is not None and type_node.type == "struct_type":
                yield Category.STRUCTS, _render_struct(
                    f"{name}{type_parameters}", type_node, source
                )
            elif type_node is not None and type_node.type == "interface_type":
                yield from _interface(name, type_parameters, type_node, source)
            else:
                yield Category.FIELDS, normalize(
                    f"type {name}{type_parameters} {node_text(type_node, source)}"
                )

    def _constants(self, node: Node, source: bytes) -> Iterator[Symbol]:
        # Specs without a value repeat the previous type and expression, with iota advanced.
        inherited_type = ""
        inherited_value = ""
        for iota, spec in enumerate(_specs(node, {"const_spec"})):
            value_node = spec.child_by_field_name("value")
            if value_node is not None:
                inherited_type = node_text(spec.child_by_field_name("type"), source)
                inherited_value = node_text(value_node, source)
            value = inherited_value
            if "iota" in value:
                value = f"{value} (iota={iota})"
            for name_node in spec.children_by_field_name("name"):
                name = node_text(name_node, source)
                if not is_exported(name):
                    continue
                typed = f"{name} {inherited_type}" if inherited_type else name
                yield Category.CONSTANTS, normalize(f"const {typed} = {value}")

    def _variables(self, node: Node, source: bytes) -> Iterator[Symbol]:
        for spec in _specs(node, {"var_spec"}):
            type_text = node_text(spec.child_by_field_name("type"), source)
            value_text = node_text(spec.child_by_field_name("value"), source)
            for name_node in spec.children_by_field_name("name"):
                name = node_text(name_node, source)
                if not is_exported(name):
                    continue
                if type_text:
                    yield Category.FIELDS, normalize(f"var {name} {type_text}")
                else:
                    yield Category.FIELDS, normalize(f"var {name} = {value_text}")


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


def _specs(node: Node, types: set[str]) -> Iterator[Node]:
    for child in node.named_children:
        if child.type in types:
            yield child
        elif child.type.endswith("_spec_list"):
            yield from _specs(child, types)


def _callable(node: Node, source: bytes) -> str:
    parameters = node_text(node.child_by_field_name("parameters"), source)
    result = node_text(node.child_by_field_name("result"), source)
    return f"{parameters} {result}" if result else parameters


def _receiver_type(receiver: Optional[Node], source: bytes) -> str:
    if receiver is None:
        return ""
    for declaration in receiver.named_children:
        if declaration.type == "parameter_declaration":
            return normalize(node_text(declaration.child_by_field_name("type"), source))
    return ""


def _base_type_name(type_text: str) -> str:
    base = type_text.lstrip("*").split("[", 1)[0]
    return base.rsplit(".", 1)[-1].strip()


def _render_struct(name: str, struct_node: Node, source: bytes) -> str:
    fields: List[str] = []
    for field_list in struct_node.named_children:
        if field_list.type != "field_declaration_list":
            continue
        for field in field_list.named_children:
            if field.type != "field_declaration":
                continue
            type_text = node_text(field.child_by_field_name("type"), source)
            names = [node_text(n, source) for n in field.children_by_field_name("name")]
            if not names:
                # Embedded field: exported when its type name is.
                if is_exported(_base_type_name(type_text)):
                    fields.append(type_text)
                continue
            fields.extend(f"{n} {type_text}" for n in names if is_exported(n))
    body = f" {', '.join(fields)} " if fields else ""
    return normalize(f"struct {name} {{{body}}}")


def _interface(
    name: str, type_parameters: str, interface_node: Node, source: bytes
) -> Iterator[Symbol]:
    embedded: List[str] = []
    for element in interface_node.named_children:
        if element.type in _METHOD_ELEMENTS:
            method = node_text(element.child_by_field_name("name"), source)
            if is_exported(method):
                yield Category.FUNCTIONS, normalize(
                    f"func ({name}) {method}{_callable(element, source)}"
                )
        elif element.type != "comment":
            embedded.append(normalize(node_text(element, source)))
    if embedded:
        yield Category.INTERFACES, normalize(
            f"interface {name}{type_parameters} {{ {', '.join(embedded)} }}"
        )
    else:
        yield Category.INTERFACES, normalize(f"interface {name}{type_parameters}")


__all__ = ["GoExtractor", "is_exported"]
