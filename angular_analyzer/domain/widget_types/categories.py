"""
Widget categories and ID fallback kinds.

Categories group template tags that share the same ID generation
strategy; see the registry for the tag and strategy tables.
"""

from enum import Enum


class WidgetCategory(str, Enum):
    """
    Categories for interactive template elements.

    Categories:
        BUTTON: Push buttons
        LINK: Anchors and router links
        INPUT: Inputs, checkboxes, radio and toggle groups/buttons
        FORM: Form containers
        SELECT: Native and Material selects
        TEXTAREA: Multi-line text inputs
        OTHER: Any other tag on the interactive allow-list
    """
    BUTTON = "Button"
    LINK = "Link"
    INPUT = "Input"
    FORM = "Form"
    SELECT = "Select"
    TEXTAREA = "Textarea"
    OTHER = "Other"


class FallbackKind(str, Enum):
    """
    What to try after the contextual attributes, before the counter.

    Kinds:
        TEXT: First direct text child of the element
        BINDING: First token of the first bound property expression
        NONE: Go straight to the symbolic counter
    """
    TEXT = "text"
    BINDING = "binding"
    NONE = "none"
