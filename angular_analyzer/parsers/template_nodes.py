"""Angular template node model.

A closed set of node kinds produced by the template parser:

  - TemplateElement   → a regular element (``<button>``, ``<app-card>``)
  - TemplateContainer → ``<ng-template>`` / ``<ng-container>``
  - TemplateText      → a run of text (interpolations included)
  - BoundAttribute    → a property binding (``[prop]``, ``bind-prop``)
  - BoundEvent        → an output binding (``(event)``, ``on-event``)

Static attributes are plain ``TextAttribute`` records. All spans are
character offsets into the template source.
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class SourceSpan:
    """Half-open character range ``[start, end)`` in the template source."""

    start: int
    end: int

    def slice(self, source: str) -> str:
        return source[self.start:self.end]


@dataclass
class TextAttribute:
    """A static attribute: ``name="value"`` or a bare ``name``."""

    name: str
    value: str
    span: SourceSpan


@dataclass
class BoundAttribute:
    """A property binding. ``value_span`` covers the bound expression."""

    name: str
    value: str
    value_span: SourceSpan

    def accept(self, visitor: 'TemplateVisitor') -> Any:
        return visitor.visit_bound_attribute(self)


@dataclass
class BoundEvent:
    """An output binding. ``handler_span`` covers the handler expression."""

    name: str
    handler: str
    handler_span: SourceSpan

    def accept(self, visitor: 'TemplateVisitor') -> Any:
        return visitor.visit_bound_event(self)


@dataclass
class TemplateText:
    value: str
    span: SourceSpan

    @property
    def has_interpolation(self) -> bool:
        return '{{' in self.value

    def accept(self, visitor: 'TemplateVisitor') -> Any:
        return visitor.visit_text(self)


@dataclass
class TemplateElement:
    """An element with its static attributes, bindings and children."""

    name: str
    span: SourceSpan
    attributes: list[TextAttribute] = field(default_factory=list)
    inputs: list[BoundAttribute] = field(default_factory=list)
    outputs: list[BoundEvent] = field(default_factory=list)
    template_attributes: list[TextAttribute] = field(default_factory=list)
    children: list['TemplateNode'] = field(default_factory=list)

    def get_attribute(self, name: str) -> TextAttribute | None:
        return next((a for a in self.attributes if a.name == name), None)

    def get_input(self, name: str) -> BoundAttribute | None:
        return next((i for i in self.inputs if i.name == name), None)

    def accept(self, visitor: 'TemplateVisitor') -> Any:
        return visitor.visit_element(self)


@dataclass
class TemplateContainer(TemplateElement):
    """``<ng-template>`` or ``<ng-container>``; renders only its children."""

    def accept(self, visitor: 'TemplateVisitor') -> Any:
        return visitor.visit_container(self)


TemplateNode = Union[TemplateElement, TemplateContainer, TemplateText]


class TemplateVisitor:
    """Base visitor; the default element/container visit walks children."""

    def visit_element(self, element: TemplateElement) -> Any:
        visit_all(self, element.children)

    def visit_container(self, container: TemplateContainer) -> Any:
        visit_all(self, container.children)

    def visit_text(self, text: TemplateText) -> Any:
        return None

    def visit_bound_attribute(self, attribute: BoundAttribute) -> Any:
        return None

    def visit_bound_event(self, event: BoundEvent) -> Any:
        return None


def visit_all(visitor: TemplateVisitor, nodes: list) -> list[Any]:
    """Dispatch every node to the visitor and collect the results."""
    return [node.accept(visitor) for node in nodes]
