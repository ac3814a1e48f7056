# sitebuilder/domain/blocks/registry.py
"""
Closed set of block types.

Each entry ties a type tag to its default payload, its normalizer, its
HTML renderer and its plain-text extractor. The set is fixed: there is
no runtime registration of new block types.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from markupsafe import Markup

from sitebuilder.domain.exceptions import InvalidBlockType
from . import html, normalizers, text

Payload = Dict[str, Any]


@dataclass(frozen=True)
class BlockType:
    name: str
    default_payload: Payload
    normalize: Callable[[Mapping[str, Any]], Payload]
    render: Callable[[Mapping[str, Any]], Markup]
    extract_text: Callable[[Mapping[str, Any]], str]

    def new_payload(self) -> Payload:
        # Handed out per block; callers may mutate it
        return copy.deepcopy(self.default_payload)


BLOCK_TYPES = (
    BlockType(
        name="text",
        default_payload={"content": ""},
        normalize=normalizers.normalize_text,
        render=html.render_text,
        extract_text=text.extract_text,
    ),
    BlockType(
        name="heading",
        default_payload={"level": 2, "text": ""},
        normalize=normalizers.normalize_heading,
        render=html.render_heading,
        extract_text=text.extract_heading,
    ),
    BlockType(
        name="image",
        default_payload={"url": "", "alt": "", "caption": ""},
        normalize=normalizers.normalize_image,
        render=html.render_image,
        extract_text=text.extract_image,
    ),
    BlockType(
        name="quote",
        default_payload={"quote": "", "author": ""},
        normalize=normalizers.normalize_quote,
        render=html.render_quote,
        extract_text=text.extract_quote,
    ),
    BlockType(
        name="button",
        default_payload={"text": "Click Here", "url": "", "style": "primary"},
        normalize=normalizers.normalize_button,
        render=html.render_button,
        extract_text=text.extract_button,
    ),
    BlockType(
        name="video",
        default_payload={"url": ""},
        normalize=normalizers.normalize_video,
        render=html.render_video,
        extract_text=text.extract_nothing,
    ),
    BlockType(
        name="spacer",
        default_payload={"height": 40},
        normalize=normalizers.normalize_spacer,
        render=html.render_spacer,
        extract_text=text.extract_nothing,
    ),
    BlockType(
        name="contact",
        default_payload={"title": "Get in Touch", "subtitle": ""},
        normalize=normalizers.normalize_contact,
        render=html.render_contact,
        extract_text=text.extract_contact,
    ),
    BlockType(
        name="columns",
        default_payload={
            "column_count": 2,
            "columns": [{"content": ""}, {"content": ""}],
        },
        normalize=normalizers.normalize_columns,
        render=html.render_columns,
        extract_text=text.extract_nothing,
    ),
)


class BlockTypeRegistry:
    def __init__(self, block_types: Iterable[BlockType] = BLOCK_TYPES):
        self._types: Dict[str, BlockType] = {t.name: t for t in block_types}

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._types

    @property
    def type_names(self) -> frozenset:
        return frozenset(self._types)

    def get(self, type_tag: Optional[str]) -> BlockType:
        try:
            return self._types[type_tag]  # type: ignore[index]
        except (KeyError, TypeError):
            raise InvalidBlockType(f"Invalid block type: {type_tag!r}") from None

    def default_payload(self, type_tag: str) -> Payload:
        return self.get(type_tag).new_payload()

    def normalize(self, type_tag: str, raw: Optional[Mapping[str, Any]]) -> Payload:
        return self.get(type_tag).normalize(raw or {})


default_registry = BlockTypeRegistry()
