"""Interactive widget extraction from parsed templates."""

import logging
from typing import Iterable, Optional

from angular_analyzer.analyzers.widget_id_generator import IdGenerationContext, WidgetIdGenerator
from angular_analyzer.domain.constants import (
    DEFAULT_INTERACTIVE_TAGS,
    INLINE_ANNOTATION_MARKER,
    ROUTER_LINK,
    SINGLE_QUOTED_RE,
    TRAILING_EMPTY_CALL_RE,
    VALIDATION_ATTRIBUTES,
)
from angular_analyzer.domain.models import WidgetInfo
from angular_analyzer.parsers.template_nodes import (
    BoundEvent,
    TemplateElement,
    TemplateNode,
    TemplateVisitor,
    visit_all,
)

logger = logging.getLogger(__name__)


class WidgetProcessor(TemplateVisitor):
    """Walks a template and builds a WidgetInfo for each interactive element.

    Children are visited whether or not their parent is interactive, so
    widgets inside plain containers and ``<ng-template>`` are found.

    A non-empty ``id`` attribute is used verbatim. IDs are not deduplicated:
    when an ID repeats within the template (two equal ``id`` attributes, or
    an ``id`` equal to a generated one) both widgets keep it and a warning
    is logged.

    Args:
        template_source: Raw template text; handler expressions are sliced from it.
        target_tags: Tag names treated as interactive (case-insensitive).
        id_generator: Generator for elements without an ``id`` attribute.
        context: Occurrence counters for symbolic IDs; a fresh one by default.
    """

    def __init__(
        self,
        template_source: str,
        target_tags: Optional[Iterable[str]] = None,
        id_generator: Optional[WidgetIdGenerator] = None,
        context: Optional[IdGenerationContext] = None,
    ) -> None:
        self.template_source = template_source
        self.target_tags = {t.lower() for t in (target_tags or DEFAULT_INTERACTIVE_TAGS)}
        self.id_generator = id_generator or WidgetIdGenerator()
        self.context = context if context is not None else IdGenerationContext()
        self._widgets: list[WidgetInfo] = []
        self._seen_ids: set[str] = set()

    def process_widgets(self, nodes: list[TemplateNode]) -> list[WidgetInfo]:
        """Extract widgets from template root nodes in document order."""
        self._widgets = []
        self._seen_ids = set()
        visit_all(self, nodes)
        return self._widgets

    def visit_element(self, element: TemplateElement) -> None:
        if element.name.lower() in self.target_tags:
            self._widgets.append(self._build_widget(element))
        visit_all(self, element.children)

    # ── Widget Building ──────────────────────────────────────────────────

    def _build_widget(self, element: TemplateElement) -> WidgetInfo:
        tag = element.name.lower()
        id_attribute = element.get_attribute('id')
        if id_attribute is not None and id_attribute.value:
            widget_id = id_attribute.value
        else:
            widget_id = self.id_generator.generate_id(element, self.context)
        if widget_id in self._seen_ids:
            logger.warning("Duplicate widget ID %s on <%s> at %s", widget_id, element.name, element.span)
        self._seen_ids.add(widget_id)

        events: dict[str, str] = {}
        router_link = self._extract_router_link(element)
        if router_link is not None:
            events[ROUTER_LINK] = router_link
        for output in element.outputs:
            events[output.name] = self._extract_handler(output)

        attributes = {a.name: a.value for a in element.attributes}
        if tag == 'input':
            attributes.setdefault('type', 'text')

        widget = WidgetInfo(
            id=widget_id,
            type=element.name,
            events=events,
            attributes=attributes,
            validation_rules=[rule for rule in VALIDATION_ATTRIBUTES if rule in attributes],
            triggers_form_submission=tag == 'button' and attributes.get('type') == 'submit',
        )
        logger.debug("Extracted widget %s (%s) with events %s", widget.id, widget.type, list(events))
        return widget

    @staticmethod
    def _extract_router_link(element: TemplateElement) -> Optional[str]:
        """Navigation target of a static or bound ``routerLink``.

        ``['/items', item.id]`` → ``/items``
        """
        binding = element.get_attribute(ROUTER_LINK) or element.get_input(ROUTER_LINK)
        if binding is None:
            return None
        value = binding.value.strip()
        match = SINGLE_QUOTED_RE.search(value)
        if match:
            value = match.group(1)
        return value.split(INLINE_ANNOTATION_MARKER)[0].strip()

    def _extract_handler(self, output: BoundEvent) -> str:
        """Handler text with one trailing empty call stripped: ``save()`` → ``save``"""
        handler = output.handler_span.slice(self.template_source).strip()
        return TRAILING_EMPTY_CALL_RE.sub('', handler).strip()
