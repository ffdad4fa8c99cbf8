from __future__ import annotations

import asyncio
from typing import Dict, Iterable, Mapping, Optional, Set

import markdown
import nh3

DOCUMENT_EXTRA_TAGS = ("div",)
DOCUMENT_EXTRA_ATTRIBUTES: Dict[str, Set[str]] = {"div": {"class"}}


def markdown_to_html_sync(text: str) -> str:
    return markdown.markdown(text)


async def markdown_to_html(text: str) -> str:
    return await asyncio.to_thread(markdown_to_html_sync, text)


def sanitize_html(
    html: str,
    extra_tags: Optional[Iterable[str]] = None,
    extra_attributes: Optional[Mapping[str, Set[str]]] = None,
) -> str:
    tags = set(nh3.ALLOWED_TAGS)
    if extra_tags:
        tags.update(extra_tags)
    attributes = {tag: set(names) for tag, names in nh3.ALLOWED_ATTRIBUTES.items()}
    for tag, names in (extra_attributes or {}).items():
        attributes.setdefault(tag, set()).update(names)
    return nh3.clean(html, tags=tags, attributes=attributes)


def sanitize_document(html: str) -> str:
    return sanitize_html(html, DOCUMENT_EXTRA_TAGS, DOCUMENT_EXTRA_ATTRIBUTES)
