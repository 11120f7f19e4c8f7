from typing import Optional

from sourcepin.parser import MarkupElement, TextChild


def is_static_text(element: MarkupElement) -> bool:
    """
    True iff the element has children and every child is literal text.

    Whitespace-only text counts as text. Any interpolation (string literals
    and template literals included) or nested markup disqualifies.
    """
    if not element.children:
        return False
    return all(isinstance(child, TextChild) for child in element.children)


def first_text_child(element: MarkupElement) -> Optional[TextChild]:
    """First text child with visible content, else the first text child at all."""
    texts = element.text_children
    for child in texts:
        if not child.is_blank:
            return child
    return texts[0] if texts else None


def has_literal_text(element: MarkupElement) -> bool:
    """True if any child is literal text with visible content."""
    return any(not child.is_blank for child in element.text_children)
