"""Markup stripping for card previews.

Turns raw note text into plain text that can be cut to a preview length.
This is not a Markdown renderer: each pass is a single regex substitution
over the whole text, and anything a pass does not recognise (an unclosed
``**``, a lone backtick) is left in place as literal text.
"""

import re

# (pattern, replacement) applied in order. Fenced blocks go before inline
# code so a ``` fence is never read as three inline-code delimiters, and
# task markers go before list markers so "- [ ] " is removed as a unit.
_PASSES: list[tuple[re.Pattern[str], str]] = [
    # Embedded images / transclusions: ![[picture.png]]
    (re.compile(r"!\[\[.*?\]\]"), ""),
    # Wiki links: [[Other note]]
    (re.compile(r"\[\[.*?\]\]"), ""),
    # Fenced code blocks, content included
    (re.compile(r"```.*?```", re.DOTALL), ""),
    # ATX headings, whole line
    (re.compile(r"^[ \t]*#{1,6}[ \t]+.*?(?:\n|$)", re.MULTILINE), ""),
    # Bold, italic, strikethrough, inline code: keep the inner text
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"\*([^*\n]+?)\*"), r"\1"),
    (re.compile(r"~~(.+?)~~"), r"\1"),
    (re.compile(r"`([^`\n]+?)`"), r"\1"),
    # Blockquote prefixes
    (re.compile(r"^[ \t]*>[ \t]?", re.MULTILINE), ""),
    # Task markers, done or open
    (re.compile(r"^[ \t]*[-*+] \[[ xX]\] ", re.MULTILINE), ""),
    # Unordered and ordered list markers
    (re.compile(r"^[ \t]*[-*+] ", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*\d+\. ", re.MULTILINE), ""),
]

ELLIPSIS = "..."


def sanitize(raw: str) -> str:
    """
    Strip lightweight markup from note text.

    Args:
        raw: Note content as stored

    Returns:
        Plain text with surrounding whitespace trimmed
    """
    text = raw
    for pattern, replacement in _PASSES:
        text = pattern.sub(replacement, text)
    return text.strip()


def make_preview(raw: str, length: int) -> str:
    """
    Build the preview shown on a file card.

    Args:
        raw: Note content as stored
        length: Maximum number of characters kept from the sanitized text

    Returns:
        Sanitized text cut to ``length``, with an ellipsis when cut
    """
    clean = sanitize(raw)
    if len(clean) > length:
        return clean[:length] + ELLIPSIS
    return clean
