"""Tests for WidgetProcessor."""

import logging

from angular_analyzer.analyzers.widget_id_generator import IdGenerationContext
from angular_analyzer.analyzers.widget_processor import WidgetProcessor
from angular_analyzer.parsers.template_parser import TemplateParser
from tests.conftest import LOGIN_COMPONENT_HTML


class TestWidgetProcessor:
    """Tests for widget extraction from templates."""

    def setup_method(self):
        self.parser = TemplateParser()

    def _widgets(self, template: str, **kwargs):
        processor = WidgetProcessor(template, **kwargs)
        return processor.process_widgets(self.parser.parse(template))

    def test_extracts_login_form_widgets(self):
        widgets = self._widgets(LOGIN_COMPONENT_HTML)
        assert [w.type for w in widgets] == ['form', 'input', 'input', 'mat-checkbox', 'button']

    def test_ids_unique_within_template(self):
        template = '<input><input><button>Save</button><button>Save</button><a>{{ x }}</a><a>{{ y }}</a>'
        ids = [w.id for w in self._widgets(template)]
        assert len(ids) == len(set(ids)) == 6

    def test_explicit_id_wins(self):
        [widget] = self._widgets('<button id="save-btn" value="save">Save</button>')
        assert widget.id == 'save-btn'

    def test_duplicate_explicit_ids_kept_verbatim(self, caplog):
        template = '<button id="save">Save</button><button id="save">Save again</button>'
        with caplog.at_level(logging.WARNING):
            ids = [w.id for w in self._widgets(template)]
        assert ids == ['save', 'save']
        assert 'Duplicate widget ID save' in caplog.text

    def test_explicit_id_colliding_with_generated_id(self, caplog):
        with caplog.at_level(logging.WARNING):
            ids = [w.id for w in self._widgets('<input id="INPUT__1"><input>')]
        assert ids == ['INPUT__1', 'INPUT__1']
        assert 'Duplicate widget ID INPUT__1' in caplog.text

    def test_unique_ids_log_nothing(self, caplog):
        with caplog.at_level(logging.WARNING):
            self._widgets('<input><input id="email">')
        assert caplog.text == ''

    def test_widgets_in_containers_found(self):
        template = (
            '<div class="toolbar"><span><button>Edit</button></span></div>'
            '<ng-template #more><button>More</button></ng-template>'
            '<ng-container *ngIf="ready"><input name="q"></ng-container>'
        )
        widgets = self._widgets(template)
        assert [w.type for w in widgets] == ['button', 'button', 'input']

    def test_widgets_inside_interactive_parent_found(self):
        widgets = self._widgets('<form name="search"><input name="q"><button>Go</button></form>')
        assert [w.type for w in widgets] == ['form', 'input', 'button']

    def test_non_interactive_tags_ignored(self):
        assert self._widgets('<div (click)="open()"><span>x</span></div>') == []

    def test_custom_target_tags(self):
        widgets = self._widgets('<input><button>Go</button>', target_tags=['BUTTON'])
        assert [w.type for w in widgets] == ['button']

    def test_event_handler_strips_empty_call(self):
        [widget] = self._widgets('<button (click)="save()" (focus)="track(item)">Save</button>')
        assert widget.events == {'click': 'save', 'focus': 'track(item)'}

    def test_two_way_binding_event(self):
        [widget] = self._widgets('<input [(ngModel)]="email">')
        assert widget.events == {'ngModelChange': 'email'}

    def test_static_router_link(self):
        [widget] = self._widgets('<a routerLink="/home">Home</a>')
        assert widget.events == {'routerLink': '/home'}

    def test_bound_router_link_array(self):
        [widget] = self._widgets("<a [routerLink]=\"['/items', item.id]\">{{ item.name }}</a>")
        assert widget.events == {'routerLink': '/items'}

    def test_router_link_inline_annotation_removed(self):
        [widget] = self._widgets('<a routerLink="/home in inline@3:12">Home</a>')
        assert widget.events['routerLink'] == '/home'

    def test_router_link_first_event(self):
        [widget] = self._widgets('<a (click)="track()" routerLink="/home">Home</a>')
        assert list(widget.events) == ['routerLink', 'click']

    def test_input_type_defaults_to_text(self):
        widgets = self._widgets('<input name="a"><input name="b" type="password">')
        assert [w.attributes['type'] for w in widgets] == ['text', 'password']

    def test_attributes_exclude_bindings(self):
        [widget] = self._widgets('<button class="primary" [disabled]="busy" (click)="go()">Go</button>')
        assert widget.attributes == {'class': 'primary'}

    def test_validation_rules_from_attributes(self):
        [widget] = self._widgets('<input max="9" required pattern="[a-z]+" min="1">')
        assert widget.validation_rules == ['required', 'pattern', 'min', 'max']

    def test_submit_button_triggers_form_submission(self):
        widgets = self._widgets('<button type="submit">Send</button><button type="button">Cancel</button>')
        assert [w.triggers_form_submission for w in widgets] == [True, False]

    def test_submit_input_does_not_trigger_flag(self):
        [widget] = self._widgets('<input type="submit" value="Send">')
        assert widget.triggers_form_submission is False

    def test_shared_context_continues_counters(self):
        context = IdGenerationContext()
        self._widgets('<input>', context=context)
        [widget] = self._widgets('<input>', context=context)
        assert widget.id == 'INPUT__2'
