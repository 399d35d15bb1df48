"""Business logic analysis for component classes.

Maps widget events to handler methods, resolves the calls each handler
makes (navigation, backend, other) against the route map, and correlates
reactive form validators with widgets by ``formControlName``.
"""

import logging
from typing import Optional

from tree_sitter import Node

from angular_analyzer.analyzers.call_classifiers import CallClassifier, KeywordCallClassifier
from angular_analyzer.domain.constants import BACKEND_ROUTE, FORM_CONTROL_NAME, QUOTES_RE, ROUTER_LINK
from angular_analyzer.domain.models import (
    EventContext,
    EventHandlerCallContext,
    RouteMap,
    WidgetEventMap,
    WidgetInfo,
)
from angular_analyzer.parsers.typescript_parser import (
    ClassDeclaration,
    array_elements,
    call_arguments,
    call_callee,
    iter_descendants,
    node_text,
    object_properties,
)

logger = logging.getLogger(__name__)


def resolve_route(
    route_map: RouteMap, base_route: str, params: list[str], resolve_static: bool = False,
) -> tuple[str, list[str]]:
    """Resolve a navigation target against the route map.

    Routes are tried in order; a route matches when it starts with the base
    route (leading ``/`` removed). A dynamic route resolves when it has as
    many ``:param`` segments as there are parameters. With
    ``resolve_static``, a route without dynamic segments also resolves when
    it equals the base route and no parameters are passed.

    Args:
        route_map: Application route map.
        base_route: First element of the navigation array, unquoted.
        params: Raw expressions of the remaining elements.
        resolve_static: Whether exact static routes resolve.

    Returns:
        ``(resolved_path, data)``; ``('', [])`` when unresolved.
    """
    prefix = base_route[1:] if base_route.startswith('/') else base_route
    for entry in route_map.components:
        if not entry.route.startswith(prefix):
            continue
        dynamic_parts = [part for part in entry.route.split('/') if part.startswith(':')]
        if dynamic_parts and len(params) == len(dynamic_parts):
            logger.debug("Resolved %s with params %s to /%s", base_route, params, entry.route)
            return f"/{entry.route}", list(params)
        if resolve_static and not dynamic_parts and not params and entry.route == prefix:
            return f"/{entry.route}", []
    return '', []


class BusinessLogicAnalyzer:
    """Extracts widget event maps from a component class.

    Args:
        widgets: Widgets extracted from the component's template. Their
            validation rules are back-filled from reactive form declarations.
        route_map: Route map used to resolve navigation targets.
        classifier: Navigation/backend call classifier.
        form_group_markers: Callee substrings identifying form group builders.
        validator_token: Substring identifying validator references.
        resolve_static_routes: Resolve navigation to an exact static route
            without parameters; such targets stay unresolved by default.
    """

    def __init__(
        self,
        widgets: list[WidgetInfo],
        route_map: RouteMap,
        classifier: Optional[CallClassifier] = None,
        form_group_markers: tuple[str, ...] = ('formBuilder.group', 'fb.group'),
        validator_token: str = 'Validators',
        resolve_static_routes: bool = False,
    ) -> None:
        self.widgets = widgets
        self.route_map = route_map
        self.classifier = classifier or KeywordCallClassifier()
        self.form_group_markers = form_group_markers
        self.validator_token = validator_token
        self.resolve_static_routes = resolve_static_routes

    def analyze(self, component: ClassDeclaration) -> list[WidgetEventMap]:
        """Build widget event maps and back-fill validation rules.

        Returns:
            One WidgetEventMap per widget with at least one handled event
            whose handler makes a call.
        """
        methods = component.methods()
        validation_rules = self.extract_validation_rules(component)
        widget_event_maps: list[WidgetEventMap] = []

        for widget in self.widgets:
            event_contexts: list[EventContext] = []

            for event, handler in widget.events.items():
                if event == ROUTER_LINK:
                    continue
                body = methods.get(handler)
                if body is None:
                    logger.warning("Handler %s for event %s not found in %s", handler, event, component.name)
                    continue
                calls = self.extract_handler_calls(body)
                if calls:
                    event_contexts.append(EventContext(event=event, handler=handler, calls=calls))

            control_name = widget.attributes.get(FORM_CONTROL_NAME)
            if control_name and control_name in validation_rules:
                widget.validation_rules = list(validation_rules[control_name])

            if event_contexts:
                widget_event_maps.append(WidgetEventMap(widget_id=widget.id, events=event_contexts))

        return widget_event_maps

    # ── Handler Calls ────────────────────────────────────────────────────

    def extract_handler_calls(self, body: Node) -> list[EventHandlerCallContext]:
        """Resolve every call in a handler body, deduplicated.

        Calls are keyed by ``caller->called``; on a collision the call
        carrying more data is kept.
        """
        unique_calls: dict[str, EventHandlerCallContext] = {}
        for call in iter_descendants(body, 'call_expression', include_self=True):
            context = self.resolve_call(call)
            existing = unique_calls.get(context.key)
            if existing is None or len(existing.data) < len(context.data):
                unique_calls[context.key] = context
        return list(unique_calls.values())

    def resolve_call(self, call: Node) -> EventHandlerCallContext:
        caller = call_callee(call)
        if self.classifier.is_navigation(caller):
            called, data = self._resolve_navigation(call_arguments(call))
            return EventHandlerCallContext(caller=caller, called=called, data=data)
        if self.classifier.is_backend(caller):
            return EventHandlerCallContext(caller=caller, called=BACKEND_ROUTE)
        return EventHandlerCallContext(caller=caller)

    def _resolve_navigation(self, arguments: list[Node]) -> tuple[str, list[str]]:
        if len(arguments) != 1 or arguments[0].type != 'array':
            return '', []
        elements = array_elements(arguments[0])
        if not elements:
            return '', []
        base_route = QUOTES_RE.sub('', node_text(elements[0]))
        params = [node_text(e) for e in elements[1:]]
        return resolve_route(self.route_map, base_route, params, self.resolve_static_routes)

    # ── Validation Rules ─────────────────────────────────────────────────

    def extract_validation_rules(self, component: ClassDeclaration) -> dict[str, list[str]]:
        """Map form control names to their validator references.

        Reads ``this.formBuilder.group({ email: ['', [Validators.required]] })``
        style declarations anywhere in the class body. Every array-initialized
        control gets an entry, an empty list when it has no validators.
        """
        rules: dict[str, list[str]] = {}
        if component.body is None:
            return rules

        for call in iter_descendants(component.body, 'call_expression'):
            callee = call_callee(call)
            if not any(marker in callee for marker in self.form_group_markers):
                continue
            arguments = call_arguments(call)
            if not arguments or arguments[0].type != 'object':
                continue
            for name, initializer in object_properties(arguments[0]).items():
                if initializer.type != 'array':
                    continue
                rules[name] = self._validator_references(initializer)
        return rules

    def _validator_references(self, initializer: Node) -> list[str]:
        references = []
        for element in array_elements(initializer):
            candidates = array_elements(element) if element.type == 'array' else [element]
            references.extend(
                node_text(c) for c in candidates if self.validator_token in node_text(c)
            )
        return references
