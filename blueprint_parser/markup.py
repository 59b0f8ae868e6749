"""
Text-scanning primitives for raw HTML.

No DOM is built.  The pages are handled as plain strings:
- decode_entities / normalize_text / strip_tags clean up field text
- split_sections cuts a document into repeated marker-delimited chunks
- locate_balanced_region bounds a container whose children may reuse the
  container's own tag name (a list of lists, a div of divs)

Design principle: NEVER RAISE on bad markup.  "Not found" is returned as
None or an empty value and the caller decides what to log.
"""

import re
from typing import Optional

from .logger import get_module_logger

logger = get_module_logger("markup")

# The five references the site emits.  Anything else passes through.
HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

# Single alternation so every reference is replaced exactly once, left to
# right: "&amp;lt;" becomes "&lt;", never "<".
ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in HTML_ENTITIES))

WHITESPACE_PATTERN = re.compile(r"\s+")

TAG_PATTERN = re.compile(r"<[^>]*>")

DIGITS_PATTERN = re.compile(r"\d+")

# Longer digit runs are not a real count (and overflow int() limits)
MAX_QUANTITY_DIGITS = 12


def decode_entities(text: str) -> str:
    """Replace the five common HTML character references in one pass."""
    if "&" not in text:
        return text
    return ENTITY_PATTERN.sub(lambda match: HTML_ENTITIES[match.group(0)], text)


def normalize_text(text: str) -> str:
    """Decode entities, collapse whitespace runs to one space, trim."""
    return WHITESPACE_PATTERN.sub(" ", decode_entities(text)).strip()


def strip_tags(markup: str) -> str:
    """
    Drop every tag and return the normalized remaining text.

    Tags become spaces so "a<br>b" reads "a b".  Tags are removed before
    entities are decoded, so an escaped "&lt;b&gt;" survives as literal text.
    """
    return normalize_text(TAG_PATTERN.sub(" ", markup))


def extract_quantity(text: str) -> int:
    """
    First run of digits in text (markup ignored), or 0.

    Entities are decoded before tags are stripped, so markup that arrives
    escaped (as in attribute values) is dropped too and its digits are not
    read.  A digit run longer than MAX_QUANTITY_DIGITS also gives 0.

    >>> extract_quantity("<span>Qty</span> 12 units")
    12
    """
    match = DIGITS_PATTERN.search(strip_tags(decode_entities(text)))
    if match is None:
        return 0

    digits = match.group(0)
    if len(digits) > MAX_QUANTITY_DIGITS:
        logger.warning(f"Quantity with {len(digits)} digits ignored")
        return 0
    return int(digits)


def split_sections(document: str, marker: str) -> list[str]:
    """
    Cut the document at every occurrence of marker.

    Section i runs from occurrence i up to occurrence i+1, the last one up to
    the end of the document.  Text before the first marker is dropped.  No
    occurrence gives an empty list.
    """
    if not marker:
        return []

    sections = []
    cursor = document.find(marker)
    while cursor != -1:
        next_cursor = document.find(marker, cursor + len(marker))
        end = len(document) if next_cursor == -1 else next_cursor
        sections.append(document[cursor:end])
        cursor = next_cursor
    return sections


def _find_tag_open(document: str, tag_prefix: str, start: int) -> int:
    """
    Find the next opening of a tag family, e.g. "<ul".

    A prefix ending in a name character must be followed by a non-name
    character, so "<ul" does not match "<ul-x" and "<li" does not match
    "<link".
    """
    check_boundary = tag_prefix[-1].isalnum()
    index = document.find(tag_prefix, start)
    while index != -1 and check_boundary:
        after = index + len(tag_prefix)
        if after >= len(document):
            break
        next_char = document[after]
        if not (next_char.isalnum() or next_char in "-_:"):
            break
        index = document.find(tag_prefix, index + 1)
    return index


def _find_tag_end(document: str, start: int) -> int:
    """Index of the ">" closing the tag that starts at start, skipping quoted values."""
    quote = None
    for index in range(start, len(document)):
        char = document[index]
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index
    return -1


def locate_balanced_region(
    document: str,
    open_marker: str,
    nested_tag: str,
    close_tag: str
) -> Optional[str]:
    """
    Return the content of the container that opens at open_marker.

    The marker is the start of the container's opening tag; the region begins
    after that tag's ">" and ends just before the close_tag that matches it.
    Every nested_tag opening seen before the next close_tag increments the
    depth, every close_tag decrements it, and the close that brings the depth
    back to zero ends the region.  An opening found at the same position as a
    close is counted first.

    A marker ending in a tag name only matches that whole name ("<div" skips
    "<divider"), and a ">" inside a quoted attribute value does not end the
    opening tag.

    Returns None when the marker is absent, its opening tag never ends, or the
    container is never closed.

    Args:
        document: Raw markup to scan
        open_marker: Literal prefix of the container's opening tag
        nested_tag: Opening prefix of the same tag family, e.g. "<ul"
        close_tag: Closing tag of that family, e.g. "</ul>"

    Returns:
        The inner markup of the container, or None
    """
    if not open_marker or not close_tag:
        return None

    marker_at = _find_tag_open(document, open_marker, 0)
    if marker_at == -1:
        return None

    # Skip the rest of the opening tag (attributes after the marker)
    tag_end = _find_tag_end(document, marker_at)
    if tag_end == -1:
        logger.debug(f"Opening tag never ends: {open_marker!r}")
        return None
    start = tag_end + 1

    # --- Depth-counting scan: depth + cursor, nothing else ---
    depth = 1
    cursor = start
    next_open = _find_tag_open(document, nested_tag, cursor) if nested_tag else -1

    while True:
        next_close = document.find(close_tag, cursor)
        if next_close == -1:
            logger.debug(f"Unterminated region for {open_marker!r} (depth {depth})")
            return None

        if next_open != -1 and next_open < cursor:
            next_open = _find_tag_open(document, nested_tag, cursor)

        if next_open != -1 and next_open <= next_close:
            depth += 1
            cursor = next_open + len(nested_tag)
            continue

        depth -= 1
        if depth == 0:
            return document[start:next_close]
        cursor = next_close + len(close_tag)
