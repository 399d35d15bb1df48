"""
Parser for Angular component templates.

This module provides the TemplateParser class, which parses template HTML
with tree-sitter and converts the syntax tree into the Angular template
node model (elements, containers, text, property and event bindings).

Binding syntax recognized on attributes:

  - ``[prop]`` / ``bind-prop``          → BoundAttribute
  - ``(event)`` / ``on-event``          → BoundEvent
  - ``[(prop)]`` / ``bindon-prop``      → BoundAttribute + ``propChange`` BoundEvent
  - ``*directive``                      → template attribute
  - ``#ref`` / ``ref-x`` / ``let-x``    → ignored (template variables)

Angular expressions (interpolations, ``@if (...)`` style block parameters,
``@let`` values) and bare ``<``/``>`` in text are masked before parsing, so
only malformed markup is reported as a syntax error.
"""

import html
import logging
import re

import tree_sitter_html
from tree_sitter import Language, Node, Parser

from angular_analyzer.domain.errors import SourceParseError
from angular_analyzer.parsers.template_nodes import (
    BoundAttribute,
    BoundEvent,
    SourceSpan,
    TemplateContainer,
    TemplateElement,
    TemplateNode,
    TemplateText,
    TextAttribute,
)

logger = logging.getLogger(__name__)

HTML_LANGUAGE = Language(tree_sitter_html.language())

CONTAINER_TAGS = {'ng-template', 'ng-container'}
TEXT_NODE_TYPES = {'text', 'entity'}
RAW_ELEMENT_TYPES = {'script_element', 'style_element'}
RAW_TEXT_TAGS = ('script', 'style')

INTERPOLATION_RE = re.compile(r'\{\{(.*?)\}\}', re.S)
BLOCK_HEADER_RE = re.compile(r'@(?:else\s+if|if|for|switch|case|defer|placeholder|loading)\s*\(')
LET_DECLARATION_RE = re.compile(r'@let\s+[\w$]+\s*=([^;]*);')
TAG_NAME_RE = re.compile(r'<([A-Za-z][\w:-]*)')


class _OffsetMap:
    """Converts tree-sitter byte offsets to character offsets."""

    def __init__(self, text: str, source: bytes):
        self._identity = len(text) == len(source)
        self._chars: list[int] = []
        if not self._identity:
            self._chars = [0] * (len(source) + 1)
            pos = 0
            for index, char in enumerate(text):
                width = len(char.encode('utf-8'))
                for k in range(width):
                    self._chars[pos + k] = index
                pos += width
            self._chars[pos] = len(text)

    def char(self, byte_offset: int) -> int:
        return byte_offset if self._identity else self._chars[byte_offset]

    def span(self, node: Node) -> SourceSpan:
        return SourceSpan(self.char(node.start_byte), self.char(node.end_byte))


# ── Expression Masking ───────────────────────────────────────────────────

def _blank(chars: list[str], start: int, end: int) -> None:
    for index in range(start, end):
        if chars[index] != '\n':
            chars[index] = ' '


def _closing_paren(text: str, start: int) -> int:
    """Index of the ``)`` closing the group opened just before ``start``."""
    depth, quote = 1, ''
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = ''
        elif char in '\'"`':
            quote = char
        elif char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return index
    return len(text)


def _tag_end(text: str, start: int) -> int:
    """Index just past the ``>`` closing the tag opened at ``start``."""
    quote = ''
    for index in range(start + 1, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = ''
        elif char in '\'"':
            quote = char
        elif char == '>':
            return index + 1
    return len(text)


def _mask_stray_brackets(chars: list[str]) -> None:
    text = ''.join(chars)
    lowered = text.lower()
    index, length = 0, len(text)
    while index < length:
        char = text[index]
        if char == '<' and text.startswith('<!--', index):
            end = text.find('-->', index + 4)
            index = length if end < 0 else end + 3
        elif char == '<' and index + 1 < length and (text[index + 1].isalpha() or text[index + 1] in '/!'):
            start = index
            index = _tag_end(text, start)
            name = TAG_NAME_RE.match(text, start)
            if name is not None and name.group(1).lower() in RAW_TEXT_TAGS:
                close = lowered.find(f"</{name.group(1).lower()}", index)
                index = length if close < 0 else close
        else:
            if char in '<>':
                chars[index] = ' '
            index += 1


def mask_template_expressions(template: str) -> str:
    """
    Blank out Angular expressions and stray ``<``/``>`` in text content.

    Interpolation bodies, control flow block parameters and ``@let`` values
    may hold comparison operators that HTML reads as markup, and plain text
    may hold a bare ``>``. Each masked character becomes a space (newlines
    are kept), so the result has the length of the input and spans computed
    on it index the unmasked template.

    Example:
        ``@if (count > 0) { {{ a < b }} }`` → ``@if (         ) { {{       }} }``
    """
    chars = list(template)
    for match in INTERPOLATION_RE.finditer(template):
        _blank(chars, match.start(1), match.end(1))
    for match in LET_DECLARATION_RE.finditer(template):
        _blank(chars, match.start(1), match.end(1))
    for match in BLOCK_HEADER_RE.finditer(template):
        _blank(chars, match.end(), _closing_paren(template, match.end()))
    _mask_stray_brackets(chars)
    return ''.join(chars)


class TemplateParser:
    """
    Parser for Angular template HTML.

    Raises SourceParseError when tree-sitter reports a syntax error, since
    the analysis is not designed to work on malformed templates.
    """

    def __init__(self):
        self._parser = Parser(HTML_LANGUAGE)

    def parse(self, template: str, source_name: str = 'inline') -> list[TemplateNode]:
        """
        Parse a template into root nodes.

        Args:
            template: Template source text
            source_name: Name used in error messages (file path or 'inline')

        Returns:
            List of root TemplateNode instances in document order
        """
        masked = mask_template_expressions(template)
        source = masked.encode('utf-8')
        tree = self._parser.parse(source)
        if tree.root_node.has_error:
            raise SourceParseError(source_name, f"Template syntax error in {source_name}")

        # Masking keeps every character in place, so spans index the unmasked text
        offsets = _OffsetMap(masked, source)
        return self._convert_children(tree.root_node, template, offsets)

    # ── Node Conversion ──────────────────────────────────────────────────

    def _convert_children(self, node: Node, template: str, offsets: _OffsetMap) -> list[TemplateNode]:
        nodes: list[TemplateNode] = []
        text_run: list[Node] = []

        for child in node.children:
            if child.type in TEXT_NODE_TYPES:
                text_run.append(child)
                continue
            if text_run:
                nodes.append(self._convert_text(text_run, template, offsets))
                text_run = []
            if child.type == 'element' or child.type in RAW_ELEMENT_TYPES:
                nodes.append(self._convert_element(child, template, offsets))
            elif child.type == 'erroneous_end_tag':
                logger.debug("Ignoring unmatched end tag at %s", offsets.span(child))

        if text_run:
            nodes.append(self._convert_text(text_run, template, offsets))
        return nodes

    @staticmethod
    def _convert_text(run: list[Node], template: str, offsets: _OffsetMap) -> TemplateText:
        span = SourceSpan(offsets.char(run[0].start_byte), offsets.char(run[-1].end_byte))
        return TemplateText(value=html.unescape(span.slice(template)), span=span)

    def _convert_element(self, node: Node, template: str, offsets: _OffsetMap) -> TemplateElement:
        tag = next((c for c in node.children if c.type in ('start_tag', 'self_closing_tag')), None)
        if tag is None:
            raise SourceParseError('template', f"Element without start tag at {offsets.span(node)}")

        name_node = next((c for c in tag.children if c.type == 'tag_name'), None)
        name = name_node.text.decode('utf-8') if name_node is not None else ''
        element_cls = TemplateContainer if name.lower() in CONTAINER_TAGS else TemplateElement
        element = element_cls(name=name, span=offsets.span(node))

        for attribute in tag.children:
            if attribute.type == 'attribute':
                self._add_attribute(element, attribute, template, offsets)

        if node.type == 'element':
            element.children = self._convert_children(node, template, offsets)
        return element

    # ── Attributes ───────────────────────────────────────────────────────

    def _add_attribute(self, element: TemplateElement, node: Node, template: str, offsets: _OffsetMap) -> None:
        name_node = next((c for c in node.children if c.type == 'attribute_name'), None)
        if name_node is None:
            return
        name = name_node.text.decode('utf-8')
        value_span = self._value_span(node, name_node, offsets)
        raw_value = value_span.slice(template)

        if name.startswith('[(') and name.endswith(')]'):
            self._add_two_way(element, name[2:-2], raw_value, value_span)
        elif name.startswith('bindon-'):
            self._add_two_way(element, name[len('bindon-'):], raw_value, value_span)
        elif name.startswith('[') and name.endswith(']'):
            element.inputs.append(BoundAttribute(name[1:-1], raw_value, value_span))
        elif name.startswith('bind-'):
            element.inputs.append(BoundAttribute(name[len('bind-'):], raw_value, value_span))
        elif name.startswith('(') and name.endswith(')'):
            element.outputs.append(BoundEvent(name[1:-1], raw_value, value_span))
        elif name.startswith('on-'):
            element.outputs.append(BoundEvent(name[len('on-'):], raw_value, value_span))
        elif name.startswith('*'):
            element.template_attributes.append(TextAttribute(name[1:], raw_value, value_span))
        elif name.startswith('#') or name.startswith(('ref-', 'let-')):
            return
        else:
            element.attributes.append(TextAttribute(name, html.unescape(raw_value), offsets.span(node)))

    @staticmethod
    def _add_two_way(element: TemplateElement, name: str, value: str, span: SourceSpan) -> None:
        element.inputs.append(BoundAttribute(name, value, span))
        element.outputs.append(BoundEvent(f"{name}Change", value, span))

    @staticmethod
    def _value_span(node: Node, name_node: Node, offsets: _OffsetMap) -> SourceSpan:
        for child in node.children:
            if child.type == 'attribute_value':
                return offsets.span(child)
            if child.type == 'quoted_attribute_value':
                inner = next((c for c in child.children if c.type == 'attribute_value'), None)
                if inner is not None:
                    return offsets.span(inner)
                # Empty quoted value: point between the quotes
                start = offsets.char(child.start_byte) + 1
                return SourceSpan(start, start)
        end = offsets.char(name_node.end_byte)
        return SourceSpan(end, end)
