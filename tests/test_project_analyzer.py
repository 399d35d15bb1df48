"""End-to-end tests for ProjectAnalyzer."""

import os
import re

import pytest

from angular_analyzer.analyzers.project_analyzer import ProjectAnalyzer
from angular_analyzer.domain.errors import RouteFileNotFoundError, SourceParseError, TemplateNotFoundError
from angular_analyzer.domain.models import AnalyzerOptions, ComponentRoute, RedirectRoute
from tests.conftest import BROKEN_COMPONENT_TS


class TestProjectAnalyzer:
    """Tests for the full analysis pipeline on a sample project."""

    def test_route_map(self, angular_project):
        result = ProjectAnalyzer(angular_project).analyze()
        assert result.route_map.components == [
            ComponentRoute('HomeComponent', 'home'),
            ComponentRoute('ListComponent', 'items'),
            ComponentRoute('DetailComponent', 'items/:id'),
            ComponentRoute('LoginComponent', 'login'),
        ]
        assert result.route_map.redirections == [RedirectRoute('', '/home')]

    def test_components_discovered_in_path_order(self, angular_project):
        result = ProjectAnalyzer(angular_project).analyze()
        assert [c.info.name for c in result.component_map] == [
            'DetailComponent', 'HomeComponent', 'ListComponent', 'LoginComponent',
        ]
        assert result.component_map.find('app-home').info.source_file == 'src/app/home/home.component.ts'

    def test_app_config_reaches_components_through_imports(self, angular_project):
        app_config = os.path.join(os.path.dirname(angular_project), 'tsconfig.app.json')
        result = ProjectAnalyzer(app_config).analyze()
        assert [c.info.name for c in result.component_map] == [
            'DetailComponent', 'HomeComponent', 'ListComponent', 'LoginComponent',
        ]

    def test_app_config_without_following_imports(self, angular_project):
        app_config = os.path.join(os.path.dirname(angular_project), 'tsconfig.app.json')
        result = ProjectAnalyzer(app_config, AnalyzerOptions(follow_imports=False)).analyze()
        assert len(result.component_map) == 0
        assert len(result.route_map.components) == 4

    def test_home_navigation_resolved(self, angular_project):
        home = ProjectAnalyzer(angular_project).analyze().component_map.find('app-home')
        assert home.info.nested_components == ['app-item-list']
        [event_map] = home.widget_event_maps
        [event] = event_map.events
        assert event.handler == 'openFirst'
        assert [c.to_dict() for c in event.calls] == [
            {'caller': 'this.router.navigate', 'called': '/items/:id', 'data': ['this.firstId']},
        ]

    def test_login_form(self, angular_project):
        login = ProjectAnalyzer(angular_project).analyze().component_map.find('app-login')
        form, email, password, remember, submit = login.info.widgets

        assert re.fullmatch(r'FORM__loginForm__[0-9a-f]{8}', form.id)
        assert email.id.startswith('INPUT__email__')
        assert email.validation_rules == ['Validators.required', 'Validators.email']
        assert password.validation_rules == ['Validators.required']
        assert remember.id.startswith('MAT-CHECKBOX__remember__')
        assert remember.validation_rules == []
        assert submit.id.startswith('BUTTON__sign_in__')
        assert submit.triggers_form_submission

        [event_map] = login.widget_event_maps
        assert event_map.widget_id == form.id
        calls = event_map.events[0].calls
        assert [(c.caller, c.called) for c in calls] == [
            ('this.authService.login', '/backend'),
            ('this.router.navigate', ''),
        ]

    def test_static_routes_resolved_with_option(self, angular_project):
        options = AnalyzerOptions(resolve_static_routes=True)
        login = ProjectAnalyzer(angular_project, options).analyze().component_map.find('app-login')
        calls = login.widget_event_maps[0].events[0].calls
        assert [c.called for c in calls] == ['/backend', '/home']

    def test_list_component_arrow_handler(self, angular_project):
        item_list = ProjectAnalyzer(angular_project).analyze().component_map.find('app-item-list')
        link, reload = item_list.info.widgets
        assert link.id == 'A__1'
        assert link.events == {'routerLink': '/items'}
        assert [m.widget_id for m in item_list.widget_event_maps] == [reload.id]

    def test_ids_stable_between_runs(self, angular_project):
        first = ProjectAnalyzer(angular_project).analyze().to_dict()
        second = ProjectAnalyzer(angular_project).analyze().to_dict()
        assert first == second

    def test_template_counter_scope(self, angular_project, add_project_file):
        add_project_file('src/app/a/a.component.ts',
                         "@Component({ selector: 'app-a', template: '<input>' })\nexport class AComponent {}\n")
        add_project_file('src/app/b/b.component.ts',
                         "@Component({ selector: 'app-b', template: '<input>' })\nexport class BComponent {}\n")
        result = ProjectAnalyzer(angular_project).analyze()
        assert result.component_map.find('app-a').info.widgets[0].id == 'INPUT__1'
        assert result.component_map.find('app-b').info.widgets[0].id == 'INPUT__1'

    def test_project_counter_scope(self, angular_project, add_project_file):
        add_project_file('src/app/a/a.component.ts',
                         "@Component({ selector: 'app-a', template: '<input>' })\nexport class AComponent {}\n")
        add_project_file('src/app/b/b.component.ts',
                         "@Component({ selector: 'app-b', template: '<input>' })\nexport class BComponent {}\n")
        options = AnalyzerOptions(id_counter_scope='project')
        result = ProjectAnalyzer(angular_project, options).analyze()
        assert result.component_map.find('app-a').info.widgets[0].id == 'INPUT__1'
        assert result.component_map.find('app-b').info.widgets[0].id == 'INPUT__2'

    def test_unknown_counter_scope_rejected(self, angular_project):
        with pytest.raises(ValueError):
            ProjectAnalyzer(angular_project, AnalyzerOptions(id_counter_scope='global'))

    def test_missing_template_fatal_when_strict(self, angular_project, add_project_file):
        add_project_file('src/app/broken/broken.component.ts', BROKEN_COMPONENT_TS)
        with pytest.raises(TemplateNotFoundError):
            ProjectAnalyzer(angular_project).analyze()

    def test_missing_template_skipped_when_lenient(self, angular_project, add_project_file, caplog):
        add_project_file('src/app/broken/broken.component.ts', BROKEN_COMPONENT_TS)
        result = ProjectAnalyzer(angular_project, AnalyzerOptions(strict=False)).analyze()
        assert result.component_map.find('app-broken') is None
        assert len(result.component_map) == 4
        assert 'BrokenComponent' in caplog.text

    def test_spec_files_not_analyzed(self, angular_project, add_project_file):
        add_project_file('src/app/broken/broken.component.spec.ts', BROKEN_COMPONENT_TS)
        result = ProjectAnalyzer(angular_project).analyze()
        assert len(result.component_map) == 4

    def test_malformed_source_raises(self, angular_project, add_project_file):
        add_project_file('src/app/bad.ts', "export class Bad {\n  run( {\n")
        with pytest.raises(SourceParseError):
            ProjectAnalyzer(angular_project).analyze()

    def test_missing_routes_file(self, angular_project):
        options = AnalyzerOptions(routes_file='src/app/app-routing.module.ts')
        with pytest.raises(RouteFileNotFoundError):
            ProjectAnalyzer(angular_project, options).analyze()

    def test_custom_interactive_tags(self, angular_project):
        options = AnalyzerOptions(interactive_tags=frozenset({'form'}))
        login = ProjectAnalyzer(angular_project, options).analyze().component_map.find('app-login')
        assert [w.type for w in login.info.widgets] == ['form']

    def test_result_to_dict(self, angular_project):
        data = ProjectAnalyzer(angular_project).analyze().to_dict()
        assert set(data) == {'routeMap', 'componentMap'}
        assert isinstance(data['componentMap'], list)
        detail = data['componentMap'][0]
        assert detail['info']['selector'] == 'app-item-detail'
        assert detail['widgetEventMaps'][0]['widgetID'] == 'back-button'
