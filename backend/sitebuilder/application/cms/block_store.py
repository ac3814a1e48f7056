# sitebuilder/application/cms/block_store.py
"""
Block persistence and ordering for a single page.

Every operation re-checks that the caller's tenant owns the page before
touching anything: this is the tenant-isolation boundary of the block
subsystem, independent of whatever the HTTP layer already checked.

Ordering model:
- a new block is appended at ``max(order) + 1`` (or 0 on an empty page)
- deleting a block leaves the other order values alone (gaps are fine)
- moving a block swaps its order with the nearest active neighbour
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import func, select

from sitebuilder.domain.blocks.registry import BlockTypeRegistry, default_registry
from sitebuilder.domain.exceptions import BlockNotFound
from sitebuilder.domain.invariants.block import assert_order_unshared
from sitebuilder.models.block import Block
from sitebuilder.models.media_item import MediaItem
from sitebuilder.models.page import Page
from sitebuilder.utils.audit import log_action
from sitebuilder.utils.media import MediaStorage
from sitebuilder.utils.transaction import unit_of_work
from .page_lookup import PageLookup
from .search_index import SearchIndexSynchronizer

logger = logging.getLogger(__name__)


class BlockStore:
    def __init__(
        self,
        session,
        *,
        registry: BlockTypeRegistry = default_registry,
        lookup: Optional[PageLookup] = None,
        indexer: Optional[SearchIndexSynchronizer] = None,
        storage: Optional[MediaStorage] = None,
    ):
        self.session = session
        self.registry = registry
        self.lookup = lookup or PageLookup(session)
        self.indexer = indexer
        self.storage = storage

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------
    def list_blocks(self, tenant_id: str, page_id: str) -> List[Block]:
        page = self.lookup.get_owned_page(tenant_id, page_id)
        return self.lookup.active_blocks(page.id)

    def get_block(self, tenant_id: str, page_id: str, block_id: str) -> Block:
        page = self.lookup.get_owned_page(tenant_id, page_id)
        return self._load_block(page, block_id)

    def _load_block(self, page: Page, block_id: str) -> Block:
        block = self.session.get(Block, block_id)
        if block is None or block.is_deleted or block.page_id != page.id:
            raise BlockNotFound(f"Block {block_id} not found on page {page.id}")
        return block

    def _next_order(self, page_id: str) -> int:
        max_order = self.session.execute(
            select(func.max(Block.order)).where(
                Block.page_id == page_id,
                Block.deleted_at.is_(None),
            )
        ).scalar()
        return 0 if max_order is None else max_order + 1

    # -------------------------------------------------
    # Mutations
    # -------------------------------------------------
    def create(
        self,
        tenant_id: str,
        page_id: str,
        block_type: str,
        fields: Optional[Mapping[str, Any]] = None,
        *,
        actor_id: Optional[str] = None,
    ) -> Block:
        """
        Append a block of ``block_type`` to the page.

        Without ``fields`` the block starts from its type's default
        payload; image blocks created straight from an upload pass their
        fields in and get them normalized.
        """
        page = self.lookup.get_owned_page(tenant_id, page_id)
        block_type_def = self.registry.get(block_type)

        if fields is None:
            payload = block_type_def.new_payload()
        else:
            payload = block_type_def.normalize(fields)

        with unit_of_work(self.session):
            block = Block()
            block.tenant_id = page.tenant_id
            block.page_id = page.id
            block.type = block_type_def.name
            block.order = self._next_order(page.id)
            block.payload = payload

            self.session.add(block)
            self.session.flush()

            log_action(
                self.session,
                tenant_id=page.tenant_id,
                actor_id=actor_id,
                action="block.create",
                entity_type="block",
                entity_id=block.id,
                payload={"page_id": page.id, "type": block.type, "order": block.order},
            )

        logger.info("Created %s block %s on page %s at order %d", block.type, block.id, page.id, block.order)
        self._refresh_index(page.id)
        return block

    def update(
        self,
        tenant_id: str,
        page_id: str,
        block_id: str,
        fields: Optional[Mapping[str, Any]],
        *,
        upload=None,
        actor_id: Optional[str] = None,
    ) -> Block:
        """
        Replace the block's payload with the normalized ``fields``.

        For image blocks an uploaded file is stored, recorded as a
        MediaItem, thumbnailed and wired into the payload within the same
        unit of work; if anything fails the file and its thumbnail are
        removed again.
        """
        page = self.lookup.get_owned_page(tenant_id, page_id)
        block = self._load_block(page, block_id)
        fields = dict(fields or {})

        with unit_of_work(self.session) as uow:
            if upload is not None and block.type == "image":
                media = self._store_upload(uow, page, upload, actor_id)
                fields["url"] = media.url
                fields.pop("selected_image_url", None)

            block.payload = self.registry.normalize(block.type, fields)

            log_action(
                self.session,
                tenant_id=page.tenant_id,
                actor_id=actor_id,
                action="block.update",
                entity_type="block",
                entity_id=block.id,
                payload={"page_id": page.id, "fields": sorted(block.payload)},
            )

        logger.info("Updated %s block %s on page %s", block.type, block.id, page.id)
        self._refresh_index(page.id)
        return block

    def _store_upload(self, uow, page: Page, upload, actor_id: Optional[str]) -> MediaItem:
        if self.storage is None:
            raise RuntimeError("BlockStore has no media storage configured")

        stored = self.storage.save(upload, page.tenant_id)
        uow.on_rollback(lambda: self.storage.delete(stored.url))

        media = MediaItem()
        media.tenant_id = page.tenant_id
        media.filename = stored.filename
        media.original_name = stored.original_name
        media.url = stored.url
        media.file_size = stored.file_size
        media.mime_type = stored.mime_type
        media.uploaded_by = actor_id

        self.session.add(media)
        self.session.flush()

        thumb_path = self.storage.make_thumbnail(stored)
        if thumb_path is not None:
            uow.on_rollback(lambda: self.storage.delete_thumbnail(thumb_path))

        return media

    def delete(
        self,
        tenant_id: str,
        page_id: str,
        block_id: str,
        *,
        actor_id: Optional[str] = None,
    ) -> None:
        page = self.lookup.get_owned_page(tenant_id, page_id)
        block = self._load_block(page, block_id)

        with unit_of_work(self.session):
            block.soft_delete()

            log_action(
                self.session,
                tenant_id=page.tenant_id,
                actor_id=actor_id,
                action="block.delete",
                entity_type="block",
                entity_id=block.id,
                payload={"page_id": page.id, "order": block.order},
            )

        logger.info("Deleted block %s from page %s", block.id, page.id)
        self._refresh_index(page.id)

    def move_up(self, tenant_id: str, page_id: str, block_id: str, *, actor_id: Optional[str] = None) -> bool:
        return self._move(tenant_id, page_id, block_id, direction="up", actor_id=actor_id)

    def move_down(self, tenant_id: str, page_id: str, block_id: str, *, actor_id: Optional[str] = None) -> bool:
        return self._move(tenant_id, page_id, block_id, direction="down", actor_id=actor_id)

    def _neighbour(self, block: Block, direction: str) -> Optional[Block]:
        stmt = select(Block).where(
            Block.page_id == block.page_id,
            Block.deleted_at.is_(None),
            Block.id != block.id,
        )
        if direction == "up":
            stmt = stmt.where(Block.order < block.order).order_by(Block.order.desc())
        else:
            stmt = stmt.where(Block.order > block.order).order_by(Block.order.asc())

        return self.session.execute(stmt.limit(1)).scalar_one_or_none()

    def _move(self, tenant_id: str, page_id: str, block_id: str, *, direction: str, actor_id: Optional[str]) -> bool:
        """
        Swap the block's order with its nearest neighbour in ``direction``.
        Returns False (and changes nothing) when there is no neighbour.
        """
        page = self.lookup.get_owned_page(tenant_id, page_id)
        block = self._load_block(page, block_id)

        neighbour = self._neighbour(block, direction)
        if neighbour is None:
            return False

        siblings = self.lookup.active_blocks(page.id)
        assert_order_unshared(siblings, block.order)
        assert_order_unshared(siblings, neighbour.order)

        with unit_of_work(self.session):
            block.order, neighbour.order = neighbour.order, block.order

            log_action(
                self.session,
                tenant_id=page.tenant_id,
                actor_id=actor_id,
                action=f"block.move_{direction}",
                entity_type="block",
                entity_id=block.id,
                payload={"page_id": page.id, "swapped_with": neighbour.id},
            )

        logger.info("Moved block %s %s on page %s", block.id, direction, page.id)
        return True

    # -------------------------------------------------
    # Index
    # -------------------------------------------------
    def _refresh_index(self, page_id: str) -> None:
        """
        The mutation is already committed; an indexing failure is logged
        and never undoes it.
        """
        if self.indexer is None:
            return
        try:
            self.indexer.reindex(page_id)
        except Exception:
            logger.exception("Failed to index page %s", page_id)
