"""Route analysis for Angular routing declarations.

Builds a RouteMap from route arrays such as::

    const routes: Routes = [
      { path: 'home', component: HomeComponent },
      { path: 'items', component: ListComponent, children: [
        { path: ':id', component: DetailComponent },
      ]},
      { path: '', redirectTo: '/home', pathMatch: 'full' },
    ];
"""

import logging
from typing import Optional

from tree_sitter import Node

from angular_analyzer.domain.models import ComponentRoute, RedirectRoute, RouteMap
from angular_analyzer.parsers.typescript_parser import (
    SourceFile,
    array_elements,
    node_text,
    object_properties,
    strip_quotes,
)

logger = logging.getLogger(__name__)


class RouteAnalyzer:
    """Extracts component routes and redirects from a routing source file.

    Only top-level variables whose name is in ``route_variable_names`` and
    whose initializer is an array literal are read.
    """

    def __init__(self, route_variable_names: tuple[str, ...] = ('routes', 'appRoutes')):
        self.route_variable_names = route_variable_names

    def analyze(self, route_file: SourceFile) -> RouteMap:
        """Analyze a parsed routing file.

        Args:
            route_file: Parsed TypeScript file holding the route arrays.

        Returns:
            RouteMap with mappings and redirects in declaration order.
        """
        route_map = RouteMap()
        for name, initializer in route_file.variable_declarations():
            if name in self.route_variable_names and initializer is not None and initializer.type == 'array':
                self._process_routes(array_elements(initializer), route_map)
        return route_map

    def _process_routes(self, elements: list[Node], route_map: RouteMap, parent_path: str = '') -> None:
        for element in elements:
            properties = object_properties(element)
            if 'path' not in properties:
                continue

            path = self._extract_path(properties)
            full_path = join_route(parent_path, path)

            component = self._property_text(properties, 'component')
            if full_path and component:
                route_map.components.append(ComponentRoute(component=component, route=full_path))
                logger.debug("Component %s mapped to route %s", component, full_path)

            redirect_to = self._property_text(properties, 'redirectTo')
            if redirect_to:
                route_map.redirections.append(RedirectRoute(route=full_path, redirect_to=redirect_to))
                logger.debug("Redirect added: %s -> %s", full_path, redirect_to)

            children = properties.get('children')
            if children is not None and children.type == 'array':
                self._process_routes(array_elements(children), route_map, full_path)

    def _extract_path(self, properties: dict[str, Node]) -> str:
        path = self._property_text(properties, 'path')
        # Dynamic segment declared separately, e.g. { path: 'items', params: 'id' }
        param = self._property_text(properties, 'params')
        if param:
            path = f"{path}/:{param}"
        return path

    @staticmethod
    def _property_text(properties: dict[str, Node], name: str) -> str:
        value: Optional[Node] = properties.get(name)
        return strip_quotes(node_text(value)).strip() if value is not None else ''


def join_route(parent_path: str, path: str) -> str:
    """Join a parent route path and a child segment with ``/``."""
    if not parent_path:
        return path
    if not path:
        return parent_path
    return f"{parent_path}/{path}"
