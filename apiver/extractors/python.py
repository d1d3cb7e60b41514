"""Python signature extractor built on tree-sitter-python."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set

import tree_sitter_python
from tree_sitter import Language, Node

from ..models import Category
from .tree_sitter import Symbol, TreeSitterExtractor, node_text, normalize

_INTERFACE_BASES = {"Protocol", "ABC", "typing.Protocol", "abc.ABC"}


@dataclass
class _Candidate:
    owner: str
    category: Category
    descriptor: str


class PythonExtractor(TreeSitterExtractor):
    """Extracts the public module-level API of Python packages.

    Names with a leading underscore are private; a module-level ``__all__``
    further restricts the public set. Protocols and ABCs are interfaces,
    other classes are structs, and upper-case module assignments are
    constants.
    """

    name = "python"
    suffixes = (".py", ".pyi")

    def language(self) -> Language:
        return Language(tree_sitter_python.language())

    def collect(self, root: Node, source: bytes) -> Iterable[Symbol]:
        exported: Optional[Set[str]] = None
        candidates: List[_Candidate] = []
        for node in root.named_children:
            if node.type == "expression_statement":
                assignment = _assignment(node)
                if assignment is None:
                    continue
                name = node_text(assignment.child_by_field_name("left"), source)
                if name == "__all__":
                    exported = _string_items(assignment.child_by_field_name("right"), source)
                    continue
                candidates.extend(self._assignment(name, assignment, source))
            else:
                definition = _unwrap(node)
                if definition is None:
                    continue
                if definition.type == "function_definition":
                    candidates.extend(self._function(definition, source))
                elif definition.type == "class_definition":
                    candidates.extend(self._class(definition, source))

        for candidate in candidates:
            if exported is not None and candidate.owner not in exported:
                continue
            yield candidate.category, candidate.descriptor

    def _function(
        self, node: Node, source: bytes, owner: Optional[str] = None
    ) -> Iterator[_Candidate]:
        name = node_text(node.child_by_field_name("name"), source)
        if owner is not None:
            if not (is_public(name) or name == "__init__"):
                return
        elif not is_public(name):
            return
        qualified = f"{owner}.{name}" if owner else name
        yield _Candidate(
            owner=owner or name,
            category=Category.FUNCTIONS,
            descriptor=_render_function(qualified, node, source),
        )

    def _class(self, node: Node, source: bytes) -> Iterator[_Candidate]:
        name = node_text(node.child_by_field_name("name"), source)
        if not is_public(name):
            return
        superclasses = node.child_by_field_name("superclasses")
        bases = normalize(node_text(superclasses, source))
        attributes: List[str] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else ():
            if member.type == "expression_statement":
                assignment = _assignment(member)
                if assignment is None:
                    continue
                attribute = node_text(assignment.child_by_field_name("left"), source)
                if is_public(attribute):
                    attributes.append(_render_attribute(attribute, assignment, source))
                continue
            definition = _unwrap(member)
            if definition is not None and definition.type == "function_definition":
                yield from self._function(definition, source, owner=name)

        if _is_interface(superclasses, source):
            yield _Candidate(name, Category.INTERFACES, normalize(f"class {name}{bases}"))
        else:
            fields = f" {{ {', '.join(attributes)} }}" if attributes else ""
            yield _Candidate(name, Category.STRUCTS, normalize(f"class {name}{bases}{fields}"))

    def _assignment(self, name: str, node: Node, source: bytes) -> Iterator[_Candidate]:
        if not is_public(name) or not name.isidentifier():
            return
        if name.isupper():
            value = node_text(node.child_by_field_name("right"), source)
            descriptor = f"{name} = {value}" if value else _render_attribute(name, node, source)
            yield _Candidate(name, Category.CONSTANTS, normalize(descriptor))
        else:
            yield _Candidate(name, Category.FIELDS, _render_attribute(name, node, source))


def is_public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def _unwrap(node: Node) -> Optional[Node]:
    if node.type == "decorated_definition":
        return node.child_by_field_name("definition")
    if node.type in {"function_definition", "class_definition"}:
        return node
    return None


def _assignment(statement: Node) -> Optional[Node]:
    for child in statement.named_children:
        if child.type == "assignment":
            left = child.child_by_field_name("left")
            if left is not None and left.type == "identifier":
                return child
    return None


def _string_items(node: Optional[Node], source: bytes) -> Optional[Set[str]]:
    """Names listed in an ``__all__`` value, or ``None`` when it is not a literal.

    Literal lists and tuples may be concatenated with ``+``; any other operand
    (``base.__all__``, a call, a comprehension) makes the value unresolvable.
    """
    if node is None:
        return None
    if node.type == "parenthesized_expression" and node.named_child_count == 1:
        return _string_items(node.named_children[0], source)
    if node.type == "binary_operator":
        if node_text(node.child_by_field_name("operator"), source) != "+":
            return None
        left = _string_items(node.child_by_field_name("left"), source)
        right = _string_items(node.child_by_field_name("right"), source)
        if left is None or right is None:
            return None
        return left | right
    if node.type not in {"list", "tuple"}:
        return None

    items: Set[str] = set()
    for child in node.named_children:
        if child.type == "comment":
            continue
        if child.type != "string":
            return None
        content = [part for part in child.named_children if part.type == "string_content"]
        if content:
            items.add(node_text(content[0], source))
        else:
            items.add(node_text(child, source).strip("'\""))
    return items


def _is_interface(superclasses: Optional[Node], source: bytes) -> bool:
    if superclasses is None:
        return False
    for argument in superclasses.named_children:
        text = normalize(node_text(argument, source))
        if text.split("[", 1)[0] in _INTERFACE_BASES:
            return True
        if argument.type == "keyword_argument" and text.replace(" ", "").endswith("ABCMeta"):
            return True
    return False


def _render_function(qualified: str, node: Node, source: bytes) -> str:
    prefix = "async def" if node.children and node.children[0].type == "async" else "def"
    parameters = node_text(node.child_by_field_name("parameters"), source)
    returns = node_text(node.child_by_field_name("return_type"), source)
    suffix = f" -> {returns}" if returns else ""
    return normalize(f"{prefix} {qualified}{parameters}{suffix}")


def _render_attribute(name: str, node: Node, source: bytes) -> str:
    annotation = node_text(node.child_by_field_name("type"), source)
    return normalize(f"{name}: {annotation}" if annotation else name)


__all__ = ["PythonExtractor", "is_public"]
