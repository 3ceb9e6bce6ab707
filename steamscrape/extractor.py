"""Extract structured fields from a Steam store detail page."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

# Site-specific markup; a change on the store side only yields fewer results.
ITEMPROP_ATTR = "itemprop"
ITEMPROP_SELECTOR = "[itemprop]"
SCREENSHOT_SELECTOR = "div.highlight_strip_screenshot > img[src]"

THUMBNAIL_SUFFIX = ".116x65.jpg"
FULLSIZE_SUFFIX = ".jpg"


def parse_document(body: bytes | str) -> BeautifulSoup:
    return BeautifulSoup(body, "html.parser")


def _has_element_children(tag: Tag) -> bool:
    return any(isinstance(child, Tag) for child in tag.children)


def extract_props(
    doc: BeautifulSoup, selector: str = ITEMPROP_SELECTOR
) -> dict[str, str]:
    """Collect micro-format properties from every ``[itemprop]`` element.

    The value is the ``content`` attribute when present, otherwise the text of
    a leaf element. Elements with child elements and no ``content`` are
    skipped. When a property repeats, the first occurrence is kept.
    """
    props: dict[str, str] = {}
    for item in doc.select(selector):
        name = item.get(ITEMPROP_ATTR)
        if isinstance(name, list):
            name = " ".join(name)
        if not name or name in props:
            continue

        content = item.get("content")
        if content is not None:
            props[name] = content if isinstance(content, str) else " ".join(content)
        elif not _has_element_children(item):
            props[name] = item.get_text()
    return props


def extract_screenshots(
    doc: BeautifulSoup, selector: str = SCREENSHOT_SELECTOR
) -> list[str]:
    """Return the ``src`` of every gallery-strip thumbnail, in document order."""
    return [str(img["src"]) for img in doc.select(selector)]


def fullsize_url(url: str) -> str:
    """Rewrite a gallery thumbnail URL to its full-size variant."""
    return url.replace(THUMBNAIL_SUFFIX, FULLSIZE_SUFFIX)
