"""
Selector-priority field extraction shared by every source adapter.

Each field is described by an ordered list of candidate selectors. The first
candidate that yields non-empty text (or attribute value) wins; a candidate
that errors or matches nothing just passes control to the next one.
"""

import logging
from typing import Any, Sequence

logger = logging.getLogger(__name__)


def _as_locator_selector(selector: str) -> str:
    """Playwright needs an explicit engine prefix for bare XPath expressions."""
    if selector.startswith("//") or selector.startswith("(//"):
        return f"xpath={selector}"
    return selector


async def extract_text(node: Any, selectors: Sequence[str]) -> str:
    """
    Return the trimmed text of the first selector that matches `node`
    with non-empty content, or "" if none do. Never raises.

    `node` is anything exposing Playwright's `locator()` (a Page or a Locator).
    """
    for selector in selectors:
        try:
            loc = node.locator(_as_locator_selector(selector))
            if await loc.count() == 0:
                continue
            text = await loc.first.text_content()
            if text and text.strip():
                return text.strip()
        except Exception as e:
            logger.debug(f"Selector '{selector}' failed: {e}")
            continue
    return ""


async def extract_attribute(node: Any, selectors: Sequence[str], attribute: str) -> str:
    """Same contract as extract_text, reading `attribute` instead of text."""
    for selector in selectors:
        try:
            loc = node.locator(_as_locator_selector(selector))
            if await loc.count() == 0:
                continue
            value = await loc.first.get_attribute(attribute)
            if value and value.strip():
                return value.strip()
        except Exception as e:
            logger.debug(f"Selector '{selector}' failed for attribute '{attribute}': {e}")
            continue
    return ""
