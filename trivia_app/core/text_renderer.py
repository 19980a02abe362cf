"""Display rendering for question text and answer labels.

The question API delivers plain text with HTML entities (``&quot;Hello&quot;``,
``&#039;``). Rendering decodes those entities and escapes the result, so the
player page can insert it with ``innerHTML`` while the text reads exactly as
delivered. Nothing is interpreted as markup: ``2*3*4`` and ``__init__`` stay
as they are.
"""

from __future__ import annotations

import html

from markdown_it.common.utils import escapeHtml


def render_text(text: str) -> str:
    """Return an HTML-safe fragment showing ``text`` with its entities decoded."""
    return escapeHtml(html.unescape(text))
