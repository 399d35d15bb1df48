"""
Widget Type Registry for interactive template elements.

This module maps template tag names to widget categories and each
category to the ordered ID strategy used by the widget ID generator.

Example:
    >>> from angular_analyzer.domain.widget_types import get_id_strategy
    >>>
    >>> strategy = get_id_strategy('button')
    >>> strategy.attributes
    ('name', 'value', 'formControlName')
    >>> strategy.fallback
    <FallbackKind.TEXT: 'text'>

Module Contents:
    WidgetCategory: Enum of widget categories (Button, Link, Input, ...)
    FallbackKind: Enum of non-contextual ID signals (text, binding, none)
    IdStrategy: Immutable dataclass with the attribute search order and fallback
    ID_STRATEGIES: Dictionary mapping WidgetCategory to IdStrategy
    TAG_CATEGORIES: Dictionary mapping tag name to WidgetCategory
    get_widget_category: Function to categorize a tag name
    get_id_strategy: Function to get the IdStrategy of a tag name
"""

from angular_analyzer.domain.widget_types.categories import FallbackKind, WidgetCategory
from angular_analyzer.domain.widget_types.registry import (
    ID_STRATEGIES,
    TAG_CATEGORIES,
    IdStrategy,
    get_id_strategy,
    get_widget_category,
)

__all__ = [
    'FallbackKind',
    'WidgetCategory',
    'ID_STRATEGIES',
    'TAG_CATEGORIES',
    'IdStrategy',
    'get_id_strategy',
    'get_widget_category',
]
