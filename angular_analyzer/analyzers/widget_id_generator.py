"""Widget ID generation.

ID formats (``TAG`` is the upper-cased tag name):

  - ``TAG__<context>__<suffix>`` when an attribute, binding or text signal exists
  - ``TAG__<n>`` otherwise, ``n`` counting occurrences of the tag from 1

The suffix is derived from the generation scope, the tag, the signal and
the element's offset in its template, so the same template always yields
the same IDs.
"""

import hashlib
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from angular_analyzer.domain.constants import ID_NORMALIZE_RE, ID_SEPARATOR, ID_SUFFIX_LENGTH
from angular_analyzer.domain.widget_types import FallbackKind, get_id_strategy
from angular_analyzer.parsers.template_nodes import TemplateElement, TemplateText


@dataclass
class IdGenerationContext:
    """Occurrence counters for symbolic IDs.

    One context per template keeps symbolic IDs independent between
    components; sharing one across templates numbers tags project-wide.
    """

    scope: str = ''
    occurrences: Counter = field(default_factory=Counter)

    def next_occurrence(self, tag: str) -> int:
        self.occurrences[tag] += 1
        return self.occurrences[tag]


def normalize_id_part(value: str) -> str:
    """Trim, replace whitespace runs and hyphens with ``_``, lowercase."""
    return ID_NORMALIZE_RE.sub('_', value.strip()).lower()


class WidgetIdGenerator:
    """Generates widget IDs following the widget type registry."""

    def generate_id(self, element: TemplateElement, context: IdGenerationContext) -> str:
        """Generate an ID for an element.

        Priority: contextual attribute, then the category's fallback signal
        (text content or binding), then the symbolic counter.
        """
        strategy = get_id_strategy(element.name)

        generated = self._contextual_id(element, strategy.attributes, context)
        if generated is None and strategy.fallback == FallbackKind.TEXT:
            generated = self._text_id(element, context)
        elif generated is None and strategy.fallback == FallbackKind.BINDING:
            generated = self._binding_id(element, context)
        return generated or self._symbolic_id(element, context)

    def _contextual_id(
        self, element: TemplateElement, attributes: tuple[str, ...], context: IdGenerationContext,
    ) -> Optional[str]:
        """``<input name="user name">`` → ``INPUT__user_name__<suffix>``"""
        for name in attributes:
            attribute = element.get_attribute(name)
            if attribute is not None and attribute.value.strip():
                return self._compose(element, normalize_id_part(attribute.value), context)
        return None

    def _binding_id(self, element: TemplateElement, context: IdGenerationContext) -> Optional[str]:
        """``<form [formGroup]="userForm">`` → ``FORM__userForm__<suffix>``"""
        if not element.inputs:
            return None
        tokens = element.inputs[0].value.split()
        return self._compose(element, tokens[0], context) if tokens else None

    def _text_id(self, element: TemplateElement, context: IdGenerationContext) -> Optional[str]:
        """``<button>Sign in</button>`` → ``BUTTON__sign_in__<suffix>``"""
        text = next(
            (c for c in element.children
             if isinstance(c, TemplateText) and not c.has_interpolation and c.value.strip()),
            None,
        )
        return self._compose(element, normalize_id_part(text.value), context) if text else None

    @staticmethod
    def _symbolic_id(element: TemplateElement, context: IdGenerationContext) -> str:
        tag = element.name.upper()
        return f"{tag}{ID_SEPARATOR}{context.next_occurrence(tag)}"

    @staticmethod
    def _compose(element: TemplateElement, value: str, context: IdGenerationContext) -> str:
        tag = element.name.upper()
        seed = f"{context.scope}|{tag}|{value}|{element.span.start}"
        suffix = hashlib.sha1(seed.encode('utf-8')).hexdigest()[:ID_SUFFIX_LENGTH]
        return ID_SEPARATOR.join((tag, value, suffix))
