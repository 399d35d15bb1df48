"""
Parser for TypeScript source files.

This module provides the TypeScriptParser class and a small set of node
helpers over tree-sitter-typescript syntax trees: classes and their
decorators, methods, field initializers, top-level variable declarations,
call expressions, and array/object literals.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from angular_analyzer.domain.errors import SourceParseError

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

CLASS_NODE_TYPES = {'class_declaration', 'abstract_class_declaration'}
VARIABLE_NODE_TYPES = {'lexical_declaration', 'variable_declaration'}
FUNCTION_VALUE_TYPES = {'arrow_function', 'function_expression', 'function'}

_ESCAPE_RE = re.compile(r'\\(.)', re.S)
_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0', '\n': ''}


# ── Node Helpers ─────────────────────────────────────────────────────────

def node_text(node: Node) -> str:
    """Source text of a node."""
    return node.text.decode('utf-8')


def named_children(node: Node) -> list[Node]:
    """Named children of a node, without comments."""
    return [c for c in node.named_children if c.type != 'comment']


def iter_descendants(node: Node, node_type: str, include_self: bool = False) -> Iterator[Node]:
    """Yield every descendant of the given type in document order."""
    if include_self and node.type == node_type:
        yield node
    for child in node.children:
        yield from iter_descendants(child, node_type, include_self=True)


def strip_quotes(text: str) -> str:
    return text.replace("'", '').replace('"', '').replace('`', '')


def string_value(node: Optional[Node]) -> Optional[str]:
    """
    Literal value of a string or substitution-free template string.

    Returns:
        The unescaped string, or None for any other node
    """
    if node is None:
        return None
    if node.type == 'template_string':
        if any(c.type == 'template_substitution' for c in node.children):
            return None
    elif node.type != 'string':
        return None
    body = node_text(node)[1:-1]
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def object_properties(node: Optional[Node]) -> dict[str, Node]:
    """
    Map property names of an object literal to their value nodes.

    Only ``key: value`` pairs are returned; quoted keys are unquoted.
    """
    properties: dict[str, Node] = {}
    if node is None or node.type != 'object':
        return properties
    for pair in named_children(node):
        if pair.type != 'pair':
            continue
        key = pair.child_by_field_name('key')
        value = pair.child_by_field_name('value')
        if key is not None and value is not None:
            properties[strip_quotes(node_text(key))] = value
    return properties


def array_elements(node: Optional[Node]) -> list[Node]:
    if node is None or node.type != 'array':
        return []
    return named_children(node)


def call_arguments(call: Node) -> list[Node]:
    arguments = call.child_by_field_name('arguments')
    return named_children(arguments) if arguments is not None else []


def call_callee(call: Node) -> str:
    function = call.child_by_field_name('function')
    return node_text(function) if function is not None else ''


# ── Declarations ─────────────────────────────────────────────────────────

@dataclass
class ClassDeclaration:
    """A top-level class with the decorators applied to it."""

    name: str
    node: Node
    decorators: list[Node] = field(default_factory=list)

    @property
    def body(self) -> Optional[Node]:
        return self.node.child_by_field_name('body')

    def get_decorator_call(self, name: str) -> Optional[Node]:
        """Call expression of ``@name(...)``, if the class carries it."""
        for decorator in self.decorators:
            for expression in named_children(decorator):
                if expression.type == 'call_expression' and call_callee(expression) == name:
                    return expression
        return None

    def methods(self) -> dict[str, Node]:
        """
        Map member names to their function bodies.

        Includes method definitions and fields initialized with arrow or
        function expressions. A later member with the same name wins.
        """
        methods: dict[str, Node] = {}
        if self.body is None:
            return methods
        for member in named_children(self.body):
            name_node = member.child_by_field_name('name')
            if name_node is None:
                continue
            if member.type == 'method_definition':
                body = member.child_by_field_name('body')
            elif member.type == 'public_field_definition':
                value = member.child_by_field_name('value')
                body = value.child_by_field_name('body') if value is not None and value.type in FUNCTION_VALUE_TYPES else None
            else:
                body = None
            if body is not None:
                methods[node_text(name_node)] = body
        return methods


@dataclass
class SourceFile:
    """A parsed TypeScript file."""

    path: str
    root: Node

    def classes(self) -> list[ClassDeclaration]:
        classes = []
        for statement in self.root.named_children:
            if statement.type in CLASS_NODE_TYPES:
                classes.append(self._class(statement, []))
            elif statement.type == 'export_statement':
                declaration = statement.child_by_field_name('declaration')
                if declaration is not None and declaration.type in CLASS_NODE_TYPES:
                    outer = [c for c in statement.children if c.type == 'decorator']
                    classes.append(self._class(declaration, outer))
        return classes

    def variable_declarations(self) -> list[tuple[str, Optional[Node]]]:
        """Top-level ``(name, initializer)`` pairs in declaration order."""
        declarations = []
        for statement in self.root.named_children:
            if statement.type == 'export_statement':
                exported = statement.child_by_field_name('declaration')
                if exported is not None:
                    statement = exported
            if statement.type not in VARIABLE_NODE_TYPES:
                continue
            for declarator in named_children(statement):
                if declarator.type != 'variable_declarator':
                    continue
                name = declarator.child_by_field_name('name')
                if name is not None:
                    declarations.append((node_text(name), declarator.child_by_field_name('value')))
        return declarations

    def import_specifiers(self) -> list[str]:
        """Module specifiers of import and export statements and of dynamic ``import()`` calls."""
        specifiers = []
        for statement in self.root.named_children:
            if statement.type in ('import_statement', 'export_statement'):
                value = string_value(statement.child_by_field_name('source'))
                if value:
                    specifiers.append(value)
        for call in iter_descendants(self.root, 'call_expression'):
            if call_callee(call) == 'import':
                arguments = call_arguments(call)
                value = string_value(arguments[0]) if arguments else None
                if value:
                    specifiers.append(value)
        return specifiers

    @staticmethod
    def _class(node: Node, outer_decorators: list[Node]) -> ClassDeclaration:
        name_node = node.child_by_field_name('name')
        inner = [c for c in node.children if c.type == 'decorator']
        return ClassDeclaration(
            name=node_text(name_node) if name_node is not None else '',
            node=node,
            decorators=outer_decorators + inner,
        )


class TypeScriptParser:
    """Parses TypeScript sources with tree-sitter."""

    def __init__(self):
        self._parser = Parser(TS_LANGUAGE)

    def parse(self, source: str, path: str = '<source>') -> SourceFile:
        tree = self._parser.parse(source.encode('utf-8'))
        if tree.root_node.has_error:
            raise SourceParseError(path)
        return SourceFile(path=path, root=tree.root_node)

    def parse_file(self, path: str) -> SourceFile:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()
        except UnicodeDecodeError as e:
            raise SourceParseError(path, f"{path} is not valid UTF-8: {e.reason} at byte {e.start}")
        return self.parse(source, path)
