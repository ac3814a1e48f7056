# sitebuilder/application/cms/media_usage.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sqlalchemy import select

from sitebuilder.models.block import Block
from sitebuilder.models.media_item import MediaItem
from sitebuilder.models.page import Page


@dataclass
class UsageLocation:
    page_id: str
    page_title: str
    block_id: str
    block_type: str

    def to_dict(self):
        return {
            "page_id": self.page_id,
            "page_title": self.page_title,
            "block_id": self.block_id,
            "block_type": self.block_type,
        }


def _active_image_blocks(session, tenant_id: str):
    return session.execute(
        select(Block, Page)
        .join(Page, Page.id == Block.page_id)
        .where(
            Page.tenant_id == tenant_id,
            Page.deleted_at.is_(None),
            Block.deleted_at.is_(None),
            Block.type == "image",
        )
        .order_by(Page.title.asc(), Block.order.asc())
    ).all()


def find_image_usage(session, *, tenant_id: str, image_url: str) -> List[UsageLocation]:
    """
    Active image blocks of the tenant that reference ``image_url``.

    Columns blocks may embed images in their rich HTML; those are not
    inspected.
    """
    return [
        UsageLocation(
            page_id=page.id,
            page_title=page.title,
            block_id=block.id,
            block_type=block.type,
        )
        for block, page in _active_image_blocks(session, tenant_id)
        if isinstance(block.payload, dict) and block.payload.get("url") == image_url
    ]


def find_orphaned_media(session, *, tenant_id: str) -> List[MediaItem]:
    """Media items of the tenant referenced by no active image block."""
    referenced = {
        block.payload.get("url")
        for block, _ in _active_image_blocks(session, tenant_id)
        if isinstance(block.payload, dict)
    }

    media = session.execute(
        select(MediaItem)
        .where(MediaItem.tenant_id == tenant_id)
        .order_by(MediaItem.created_at.asc())
    ).scalars()

    return [item for item in media if item.url not in referenced]
