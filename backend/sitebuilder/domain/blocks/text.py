# sitebuilder/domain/blocks/text.py
"""
Plain-text extraction used to build a page's search index entry.

Media and layout blocks contribute nothing. The rich HTML inside a
columns block is not parsed for text.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping


def _join(payload: Mapping[str, Any], keys: Iterable[str]) -> str:
    parts = []
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            parts.append(value)
    return " ".join(parts)


def extract_text(payload: Mapping[str, Any]) -> str:
    return _join(payload, ("content",))


def extract_heading(payload: Mapping[str, Any]) -> str:
    return _join(payload, ("text",))


def extract_image(payload: Mapping[str, Any]) -> str:
    return _join(payload, ("alt", "caption"))


def extract_quote(payload: Mapping[str, Any]) -> str:
    return _join(payload, ("quote", "author"))


def extract_button(payload: Mapping[str, Any]) -> str:
    return _join(payload, ("text",))


def extract_contact(payload: Mapping[str, Any]) -> str:
    return _join(payload, ("title", "subtitle"))


def extract_nothing(payload: Mapping[str, Any]) -> str:
    return ""
