# sitebuilder/domain/blocks/renderer.py
from __future__ import annotations

from typing import Any, Mapping

from markupsafe import Markup

from sitebuilder.domain.exceptions import (
    BlockRenderError,
    InvalidBlockType,
    UnknownBlockType,
)
from .registry import BlockType, BlockTypeRegistry, default_registry


class BlockRenderer:
    """
    Dispatches a (type, payload) pair to the renderer of its block type.

    ``render`` returns a self-contained, escaped HTML fragment;
    ``extract_text`` returns the plain text fed to the search index.
    """

    def __init__(self, registry: BlockTypeRegistry = default_registry):
        self.registry = registry

    def _resolve(self, block_type: str, payload: Any) -> BlockType:
        try:
            resolved = self.registry.get(block_type)
        except InvalidBlockType:
            raise UnknownBlockType(f"Unknown block type: {block_type!r}") from None

        if not isinstance(payload, Mapping):
            raise BlockRenderError(
                f"{block_type} block payload is not a JSON object"
            )
        return resolved

    def render(self, block_type: str, payload: Any) -> Markup:
        resolved = self._resolve(block_type, payload)
        try:
            return resolved.render(payload)
        except BlockRenderError:
            raise
        except (TypeError, ValueError, AttributeError, KeyError) as exc:
            raise BlockRenderError(
                f"Failed to render {block_type} block: {exc}"
            ) from exc

    def extract_text(self, block_type: str, payload: Any) -> str:
        return self._resolve(block_type, payload).extract_text(payload)
