# sitebuilder/application/cms/page_lookup.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import select

from sitebuilder.domain.exceptions import AccessDenied, PageNotFound
from sitebuilder.models.block import Block
from sitebuilder.models.page import Page


@dataclass
class PageRecord:
    page: Page
    blocks: List[Block] = field(default_factory=list)

    @property
    def tenant_id(self) -> str:
        return self.page.tenant_id


class PageLookup:
    """
    Resolves a page id to its owning tenant and its active blocks.

    Soft-deleted pages are reported as missing; soft-deleted blocks are
    never returned.
    """

    def __init__(self, session):
        self.session = session

    def find_page(self, page_id: str) -> Optional[Page]:
        page = self.session.get(Page, page_id)
        if page is None or page.is_deleted:
            return None
        return page

    def get_page(self, page_id: str) -> Page:
        page = self.find_page(page_id)
        if page is None:
            raise PageNotFound(f"Page {page_id} not found")
        return page

    def get_owned_page(self, tenant_id: str, page_id: str) -> Page:
        """
        Tenant-isolation boundary: every block operation passes through here.
        """
        page = self.get_page(page_id)
        if page.tenant_id != tenant_id:
            raise AccessDenied(f"Page {page_id} does not belong to this site")
        return page

    def find_by_slug(self, tenant_id: str, slug: str) -> Optional[Page]:
        return self.session.execute(
            select(Page).where(
                Page.tenant_id == tenant_id,
                Page.slug == slug,
                Page.deleted_at.is_(None),
            )
        ).scalar_one_or_none()

    def active_blocks(self, page_id: str) -> List[Block]:
        return list(
            self.session.execute(
                select(Block)
                .where(Block.page_id == page_id, Block.deleted_at.is_(None))
                .order_by(Block.order.asc())
            ).scalars()
        )

    def lookup(self, page_id: str) -> PageRecord:
        page = self.get_page(page_id)
        return PageRecord(page=page, blocks=self.active_blocks(page.id))
