# sitebuilder/domain/blocks/normalizers.py
"""
Per-type payload normalization.

Raw fields arrive either from the admin form (every value a string) or
from a JSON body. A normalizer always returns a complete payload: the
stored payload is replaced wholesale, never merged.

Numeric and enum fields are lenient: out-of-range or unparsable values
clamp or fall back to the type default instead of being rejected.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

HEADING_LEVELS = {2, 3, 4, 5, 6}
DEFAULT_HEADING_LEVEL = 2

BUTTON_STYLES = {"primary", "secondary"}
DEFAULT_BUTTON_STYLE = "primary"

SPACER_MIN_HEIGHT = 1
SPACER_MAX_HEIGHT = 500
DEFAULT_SPACER_HEIGHT = 40

CONTACT_DEFAULT_TITLE = "Get in Touch"

COLUMN_COUNTS = {2, 3, 4}
DEFAULT_COLUMN_COUNT = 2


def _string(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    return str(value)


def _int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def normalize_text(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {"content": _string(raw, "content")}


def normalize_heading(raw: Mapping[str, Any]) -> Dict[str, Any]:
    level = _int(raw.get("level"))
    if level not in HEADING_LEVELS:
        level = DEFAULT_HEADING_LEVEL

    return {"level": level, "text": _string(raw, "text")}


def normalize_image(raw: Mapping[str, Any]) -> Dict[str, Any]:
    # A pick from the media library overrides whatever url the form carried
    url = _string(raw, "selected_image_url") or _string(raw, "url")

    return {
        "url": url,
        "alt": _string(raw, "alt"),
        "caption": _string(raw, "caption"),
    }


def normalize_quote(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {"quote": _string(raw, "quote"), "author": _string(raw, "author")}


def normalize_button(raw: Mapping[str, Any]) -> Dict[str, Any]:
    style = _string(raw, "style")
    if style not in BUTTON_STYLES:
        style = DEFAULT_BUTTON_STYLE

    return {
        "text": _string(raw, "text"),
        "url": _string(raw, "url"),
        "style": style,
    }


def normalize_video(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {"url": _string(raw, "url")}


def normalize_spacer(raw: Mapping[str, Any]) -> Dict[str, Any]:
    height = _int(raw.get("height"))

    if height is None or height < SPACER_MIN_HEIGHT:
        height = DEFAULT_SPACER_HEIGHT
    elif height > SPACER_MAX_HEIGHT:
        height = SPACER_MAX_HEIGHT

    return {"height": height}


def normalize_contact(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "title": _string(raw, "title") or CONTACT_DEFAULT_TITLE,
        "subtitle": _string(raw, "subtitle"),
    }


def _column_contents(raw: Mapping[str, Any], count: int) -> List[str]:
    columns = raw.get("columns")

    if isinstance(columns, list):
        contents = []
        for column in columns:
            if isinstance(column, Mapping):
                contents.append(_string(column, "content"))
            else:
                contents.append("" if column is None else str(column))
        return contents

    # Form posts carry one field per column: column_0, column_1, ...
    return [_string(raw, f"column_{index}") for index in range(count)]


def normalize_columns(raw: Mapping[str, Any]) -> Dict[str, Any]:
    count = _int(raw.get("column_count"))
    if count not in COLUMN_COUNTS:
        count = DEFAULT_COLUMN_COUNT

    contents = _column_contents(raw, count)[:count]
    contents += [""] * (count - len(contents))

    return {
        "column_count": count,
        "columns": [{"content": content} for content in contents],
    }
