"""Shared data models used across analyzer modules.

Attribute names follow Python conventions; ``to_dict`` renders the wire
format consumed by instrumentation tooling (camelCase keys).
"""

from dataclasses import dataclass, field
from typing import Any


# ── Routes ───────────────────────────────────────────────────────────────

@dataclass
class ComponentRoute:
    """A route path mapped to the component class rendered for it."""

    component: str
    route: str

    def to_dict(self) -> dict[str, Any]:
        return {'component': self.component, 'route': self.route}


@dataclass
class RedirectRoute:
    """A route that redirects to another route."""

    route: str
    redirect_to: str

    def to_dict(self) -> dict[str, Any]:
        return {'route': self.route, 'redirectTo': self.redirect_to}


@dataclass
class RouteMap:
    """Flattened route table of the application."""

    components: list[ComponentRoute] = field(default_factory=list)
    redirections: list[RedirectRoute] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'components': [c.to_dict() for c in self.components],
            'redirections': [r.to_dict() for r in self.redirections],
        }


# ── Widgets ──────────────────────────────────────────────────────────────

@dataclass
class WidgetInfo:
    """An interactive element extracted from a component template."""

    id: str
    type: str
    events: dict[str, str] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    validation_rules: list[str] = field(default_factory=list)
    triggers_form_submission: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'events': dict(self.events),
            'attributes': dict(self.attributes),
            'validationRules': list(self.validation_rules),
            'triggersFormSubmission': self.triggers_form_submission,
        }


@dataclass
class EventHandlerCallContext:
    """A call found in an event handler body.

    ``called`` is ``/backend``, a resolved route path, or ``''`` when the
    target could not be resolved. ``data`` holds the raw parameter
    expressions passed for dynamic route segments.
    """

    caller: str
    called: str = ''
    data: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.caller}->{self.called}"

    def to_dict(self) -> dict[str, Any]:
        return {'caller': self.caller, 'called': self.called, 'data': list(self.data)}


@dataclass
class EventContext:
    """A widget event with its handler and the calls the handler makes."""

    event: str
    handler: str
    calls: list[EventHandlerCallContext] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'event': self.event,
            'handler': self.handler,
            'calls': [c.to_dict() for c in self.calls],
        }


@dataclass
class WidgetEventMap:
    """All handled events of one widget."""

    widget_id: str
    events: list[EventContext] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {'widgetID': self.widget_id, 'events': [e.to_dict() for e in self.events]}


# ── Components ───────────────────────────────────────────────────────────

@dataclass
class ComponentInfo:
    """Template-level view of a component."""

    selector: str
    widgets: list[WidgetInfo] = field(default_factory=list)
    nested_components: list[str] = field(default_factory=list)
    name: str = ''
    source_file: str = ''

    def to_dict(self) -> dict[str, Any]:
        return {
            'selector': self.selector,
            'name': self.name,
            'sourceFile': self.source_file,
            'widgets': [w.to_dict() for w in self.widgets],
            'nestedComponents': list(self.nested_components),
        }


@dataclass
class ComponentEntry:
    """A component together with its widget event maps."""

    info: ComponentInfo
    widget_event_maps: list[WidgetEventMap] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'info': self.info.to_dict(),
            'widgetEventMaps': [m.to_dict() for m in self.widget_event_maps],
        }


@dataclass
class ComponentMap:
    """Every analyzed component of the project, in discovery order."""

    components: list[ComponentEntry] = field(default_factory=list)

    def __iter__(self):
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def find(self, selector: str) -> ComponentEntry | None:
        return next((c for c in self.components if c.info.selector == selector), None)

    def to_list(self) -> list[dict[str, Any]]:
        return [c.to_dict() for c in self.components]


@dataclass
class AnalysisResult:
    """Structural model of an Angular project."""

    route_map: RouteMap
    component_map: ComponentMap

    def to_dict(self) -> dict[str, Any]:
        return {
            'routeMap': self.route_map.to_dict(),
            'componentMap': self.component_map.to_list(),
        }


# ── Options ──────────────────────────────────────────────────────────────

@dataclass
class AnalyzerOptions:
    """Options controlling a project analysis run."""

    routes_file: str = 'src/app/app.module.ts'
    route_variable_names: tuple[str, ...] = ('routes', 'appRoutes')
    interactive_tags: frozenset[str] | None = None
    component_prefix: str = 'app-'
    strict: bool = True
    id_counter_scope: str = 'template'
    navigation_token: str = 'navigate'
    backend_token: str = 'service'
    form_group_markers: tuple[str, ...] = ('formBuilder.group', 'fb.group')
    validator_token: str = 'Validators'
    resolve_static_routes: bool = False
    follow_imports: bool = True
