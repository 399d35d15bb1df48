"""Project-level analysis of Angular applications.

Runs the route analyzer on the routing declaration, then the template and
business logic analyzers on every ``@Component`` class of the project, and
assembles the structural model handed to instrumentation tooling.
"""

import logging
import os
from typing import Optional

from angular_analyzer.analyzers.business_logic_analyzer import BusinessLogicAnalyzer
from angular_analyzer.analyzers.call_classifiers import CallClassifier, KeywordCallClassifier
from angular_analyzer.analyzers.route_analyzer import RouteAnalyzer
from angular_analyzer.analyzers.template_analyzer import TemplateAnalyzer
from angular_analyzer.analyzers.widget_id_generator import IdGenerationContext
from angular_analyzer.domain.constants import COMPONENT_DECORATOR, COUNTER_SCOPES
from angular_analyzer.domain.errors import ComponentResolutionError, RouteFileNotFoundError
from angular_analyzer.domain.models import (
    AnalysisResult,
    AnalyzerOptions,
    ComponentEntry,
    ComponentMap,
    RouteMap,
)
from angular_analyzer.parsers.typescript_parser import ClassDeclaration, SourceFile, TypeScriptParser
from angular_analyzer.project_reader import ProjectReader

logger = logging.getLogger(__name__)


class ProjectAnalyzer:
    """Orchestrates the static analysis of an Angular project.

    Args:
        tsconfig_path: Path to the project's ``tsconfig.json``.
        options: Analysis options; defaults when omitted.
        classifier: Call classifier for handler bodies; built from the
            option tokens when omitted.
    """

    def __init__(
        self,
        tsconfig_path: str,
        options: Optional[AnalyzerOptions] = None,
        classifier: Optional[CallClassifier] = None,
    ) -> None:
        self.options = options or AnalyzerOptions()
        if self.options.id_counter_scope not in COUNTER_SCOPES:
            raise ValueError(f"Unknown counter scope: {self.options.id_counter_scope}")

        self.tsconfig_path = tsconfig_path
        self.project_path = os.path.dirname(os.path.abspath(tsconfig_path))
        self.classifier = classifier or KeywordCallClassifier(
            self.options.navigation_token, self.options.backend_token,
        )
        self.ts_parser = TypeScriptParser()
        self.route_analyzer = RouteAnalyzer(self.options.route_variable_names)
        self.template_analyzer = TemplateAnalyzer(
            target_tags=self.options.interactive_tags,
            component_prefix=self.options.component_prefix,
        )

    def analyze(self) -> AnalysisResult:
        """Analyze the project.

        Raises:
            ProjectReadError: The tsconfig cannot be read.
            RouteFileNotFoundError: The routing declaration file is missing.
            SourceParseError: A source file or template is malformed.
            ComponentResolutionError: A component has no template or selector
                (only when ``options.strict`` is set).
        """
        route_map = self.extract_route_map()
        component_map = ComponentMap()
        project_context = IdGenerationContext()

        reader = ProjectReader(ts_parser=self.ts_parser, follow_imports=self.options.follow_imports)
        contents = reader.read(self.tsconfig_path)
        for path in contents.source_files:
            source_file = self.ts_parser.parse_file(path)
            for component in source_file.classes():
                if component.get_decorator_call(COMPONENT_DECORATOR) is None:
                    continue
                context = self._id_context(component, source_file, project_context)
                entry = self._analyze_component(component, source_file, route_map, context)
                if entry is not None:
                    component_map.components.append(entry)

        logger.info(
            "Analyzed %d components, %d routes, %d redirects",
            len(component_map), len(route_map.components), len(route_map.redirections),
        )
        return AnalysisResult(route_map=route_map, component_map=component_map)

    def extract_route_map(self) -> RouteMap:
        """Parse the routing declaration file and build the route map."""
        route_path = os.path.join(self.project_path, self.options.routes_file)
        if not os.path.isfile(route_path):
            logger.error("Routing file not found: %s", route_path)
            raise RouteFileNotFoundError(f"Routing file not found: {route_path}")
        return self.route_analyzer.analyze(self.ts_parser.parse_file(route_path))

    def _id_context(
        self, component: ClassDeclaration, source_file: SourceFile, project_context: IdGenerationContext,
    ) -> IdGenerationContext:
        if self.options.id_counter_scope == 'project':
            return project_context
        relative = os.path.relpath(source_file.path, self.project_path)
        return IdGenerationContext(scope=f"{relative}#{component.name}")

    def _analyze_component(
        self,
        component: ClassDeclaration,
        source_file: SourceFile,
        route_map: RouteMap,
        context: Optional[IdGenerationContext],
    ) -> Optional[ComponentEntry]:
        try:
            info = self.template_analyzer.analyze(component, source_file, context)
        except ComponentResolutionError as e:
            if self.options.strict:
                raise
            logger.warning("Skipping component: %s", e)
            return None

        info.source_file = os.path.relpath(source_file.path, self.project_path)
        logic_analyzer = BusinessLogicAnalyzer(
            info.widgets,
            route_map,
            classifier=self.classifier,
            form_group_markers=self.options.form_group_markers,
            validator_token=self.options.validator_token,
            resolve_static_routes=self.options.resolve_static_routes,
        )
        widget_event_maps = logic_analyzer.analyze(component)
        return ComponentEntry(info=info, widget_event_maps=widget_event_maps)
