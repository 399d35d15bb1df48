"""
Widget type registry mapping template tags to ID strategies.

The priority table used by the widget ID generator lives here as data so
it can be inspected and tested independently of template traversal.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from angular_analyzer.domain.widget_types.categories import FallbackKind, WidgetCategory


@dataclass(frozen=True)
class IdStrategy:
    """
    Immutable ID generation strategy for one widget category.

    Attributes:
        category: The widget category this strategy applies to
        attributes: Static attributes searched in order for a contextual ID
        fallback: Signal tried when no contextual attribute has a value

    Example:
        >>> strategy = get_id_strategy('select')
        >>> strategy.attributes
        ('name', 'formControlName')
        >>> strategy.fallback
        <FallbackKind.NONE: 'none'>
    """
    category: WidgetCategory
    attributes: tuple[str, ...]
    fallback: FallbackKind


ID_STRATEGIES: Dict[WidgetCategory, IdStrategy] = {
    WidgetCategory.BUTTON: IdStrategy(
        WidgetCategory.BUTTON, ('name', 'value', 'formControlName'), FallbackKind.TEXT,
    ),
    WidgetCategory.LINK: IdStrategy(
        WidgetCategory.LINK, ('routerLink', 'href', 'name', 'formControlName', 'value'), FallbackKind.TEXT,
    ),
    WidgetCategory.INPUT: IdStrategy(
        WidgetCategory.INPUT, ('name', 'formControlName', 'value', 'placeholder'), FallbackKind.TEXT,
    ),
    WidgetCategory.FORM: IdStrategy(
        WidgetCategory.FORM, ('name',), FallbackKind.BINDING,
    ),
    WidgetCategory.SELECT: IdStrategy(
        WidgetCategory.SELECT, ('name', 'formControlName'), FallbackKind.NONE,
    ),
    WidgetCategory.TEXTAREA: IdStrategy(
        WidgetCategory.TEXTAREA, ('name', 'formControlName'), FallbackKind.NONE,
    ),
    WidgetCategory.OTHER: IdStrategy(
        WidgetCategory.OTHER, (), FallbackKind.TEXT,
    ),
}


TAG_CATEGORIES: Dict[str, WidgetCategory] = {
    'button': WidgetCategory.BUTTON,
    'a': WidgetCategory.LINK,
    'input': WidgetCategory.INPUT,
    'mat-checkbox': WidgetCategory.INPUT,
    'mat-radio-group': WidgetCategory.INPUT,
    'mat-radio-button': WidgetCategory.INPUT,
    'mat-button-toggle-group': WidgetCategory.INPUT,
    'mat-button-toggle': WidgetCategory.INPUT,
    'form': WidgetCategory.FORM,
    'select': WidgetCategory.SELECT,
    'mat-select': WidgetCategory.SELECT,
    'textarea': WidgetCategory.TEXTAREA,
}


def get_widget_category(tag: Optional[str]) -> WidgetCategory:
    """
    Get the category of a template tag, case-insensitively.

    Args:
        tag: Element tag name as written in the template

    Returns:
        The registered WidgetCategory, or OTHER for unregistered tags
    """
    if not tag:
        return WidgetCategory.OTHER
    return TAG_CATEGORIES.get(tag.lower(), WidgetCategory.OTHER)


def get_id_strategy(tag: Optional[str]) -> IdStrategy:
    """Get the ID strategy for a template tag."""
    return ID_STRATEGIES[get_widget_category(tag)]
