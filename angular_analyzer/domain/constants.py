"""Shared constants, regex patterns, and defaults.

Centralizes the names and patterns shared by the template, route and
business logic analyzers.
"""

import re

# ── Widget Extraction ────────────────────────────────────────────────────

DEFAULT_INTERACTIVE_TAGS = frozenset({
    'button', 'input', 'a', 'form', 'select', 'textarea',
    'mat-select', 'mat-checkbox', 'mat-radio-group',
    'mat-radio-button', 'mat-button-toggle-group', 'mat-button-toggle',
})

# Static attributes that contribute a validation rule, in reporting order
VALIDATION_ATTRIBUTES = ('required', 'pattern', 'min', 'max')

ROUTER_LINK = 'routerLink'

# Angular's AST printer appends ` in inline@line:col` to expressions
INLINE_ANNOTATION_MARKER = ' in inline@'

SINGLE_QUOTED_RE = re.compile(r"'([^']+)'")
TRAILING_EMPTY_CALL_RE = re.compile(r'\(\)$')

# ── Widget IDs ───────────────────────────────────────────────────────────

ID_SEPARATOR = '__'
ID_NORMALIZE_RE = re.compile(r'(\s+|-)')
ID_SUFFIX_LENGTH = 8

COUNTER_SCOPES = ('template', 'project')

# ── Routes & Calls ───────────────────────────────────────────────────────

BACKEND_ROUTE = '/backend'
QUOTES_RE = re.compile(r"['\"`]")

# ── Component Declarations ───────────────────────────────────────────────

COMPONENT_DECORATOR = 'Component'
FORM_CONTROL_NAME = 'formControlName'
