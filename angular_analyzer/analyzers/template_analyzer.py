"""Template analysis for ``@Component`` declarations.

Resolves a component's template (inline ``template`` or external
``templateUrl``), extracts its widgets and nested component references,
and reads its selector.
"""

import logging
import os
from typing import Iterable, Optional

from angular_analyzer.analyzers.widget_id_generator import IdGenerationContext, WidgetIdGenerator
from angular_analyzer.analyzers.widget_processor import WidgetProcessor
from angular_analyzer.domain.constants import COMPONENT_DECORATOR
from angular_analyzer.domain.errors import SelectorNotFoundError, SourceParseError, TemplateNotFoundError
from angular_analyzer.domain.models import ComponentInfo
from angular_analyzer.parsers.template_nodes import TemplateElement, TemplateNode, TemplateVisitor, visit_all
from angular_analyzer.parsers.template_parser import TemplateParser
from angular_analyzer.parsers.typescript_parser import (
    ClassDeclaration,
    SourceFile,
    call_arguments,
    node_text,
    object_properties,
    string_value,
    strip_quotes,
)

logger = logging.getLogger(__name__)


class NestedComponentCollector(TemplateVisitor):
    """Collects tag names of elements that reference project components."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.selectors: list[str] = []

    def visit_element(self, element: TemplateElement) -> None:
        if element.name.startswith(self.prefix):
            self.selectors.append(element.name)
        visit_all(self, element.children)


class TemplateAnalyzer:
    """Builds ComponentInfo for component declarations.

    Args:
        template_parser: Parser for template HTML.
        target_tags: Interactive tag allow-list passed to the widget processor.
        component_prefix: Tag prefix identifying nested project components.
        id_generator: Widget ID generator shared by all templates.
    """

    def __init__(
        self,
        template_parser: Optional[TemplateParser] = None,
        target_tags: Optional[Iterable[str]] = None,
        component_prefix: str = 'app-',
        id_generator: Optional[WidgetIdGenerator] = None,
    ) -> None:
        self.template_parser = template_parser or TemplateParser()
        self.target_tags = target_tags
        self.component_prefix = component_prefix
        self.id_generator = id_generator or WidgetIdGenerator()

    def analyze(
        self,
        component: ClassDeclaration,
        source_file: SourceFile,
        context: Optional[IdGenerationContext] = None,
    ) -> ComponentInfo:
        """Analyze the template of one component declaration.

        Raises:
            TemplateNotFoundError: No inline template and no readable template file.
            SelectorNotFoundError: The declaration has no selector.
            SourceParseError: The template is malformed.
        """
        resolved = self.extract_template(component, source_file)
        if resolved is None:
            logger.error("No template found for %s in %s", component.name, source_file.path)
            raise TemplateNotFoundError(component.name, source_file.path, 'no template found')
        template, template_name = resolved

        nodes = self.template_parser.parse(template, template_name)
        if context is None:
            context = IdGenerationContext(scope=template_name)
        processor = WidgetProcessor(template, self.target_tags, self.id_generator, context)
        widgets = processor.process_widgets(nodes)
        nested_components = self.find_nested_components(nodes)

        selector = self.extract_selector(component)
        if not selector:
            logger.error("Component selector could not be extracted for %s", component.name)
            raise SelectorNotFoundError(component.name, source_file.path, 'no selector found')

        logger.debug("Extracted %d widgets from %s", len(widgets), selector)
        return ComponentInfo(
            selector=selector,
            widgets=widgets,
            nested_components=nested_components,
            name=component.name,
            source_file=source_file.path,
        )

    def extract_template(self, component: ClassDeclaration, source_file: SourceFile) -> Optional[tuple[str, str]]:
        """Resolve the component's template.

        Returns:
            ``(template_text, template_name)`` where the name is the template
            file path or ``<source path>#inline``, or None when not found.

        Raises:
            SourceParseError: The template file is not valid UTF-8.
        """
        properties = self._decorator_properties(component)

        inline = string_value(properties.get('template'))
        if inline is not None:
            return inline, f"{source_file.path}#inline"

        template_url = string_value(properties.get('templateUrl'))
        if template_url is not None:
            template_path = os.path.normpath(os.path.join(os.path.dirname(source_file.path), template_url))
            try:
                with open(template_path, 'r', encoding='utf-8') as f:
                    return f.read(), template_path
            except OSError:
                logger.error("Template file not found: %s", template_path)
                return None
            except UnicodeDecodeError as e:
                logger.error("Template file is not valid UTF-8: %s", template_path)
                raise SourceParseError(template_path, f"{template_path} is not valid UTF-8: {e.reason} at byte {e.start}")
        return None

    def extract_selector(self, component: ClassDeclaration) -> str:
        selector = self._decorator_properties(component).get('selector')
        return strip_quotes(node_text(selector)).strip() if selector is not None else ''

    def find_nested_components(self, nodes: list[TemplateNode]) -> list[str]:
        collector = NestedComponentCollector(self.component_prefix)
        visit_all(collector, nodes)
        return collector.selectors

    @staticmethod
    def _decorator_properties(component: ClassDeclaration) -> dict:
        call = component.get_decorator_call(COMPONENT_DECORATOR)
        if call is None:
            return {}
        arguments = call_arguments(call)
        return object_properties(arguments[0]) if arguments else {}
