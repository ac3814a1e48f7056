import logging
from typing import Optional
from sitebuilder.utils.audit import log_action
from sitebuilder.utils.transaction import unit_of_work
from .page_lookup import PageLookup

logger = logging.getLogger(__name__)


def delete_page(
    session,
    *,
    tenant_id: str,
    page_id: str,
    actor_id: Optional[str] = None,
    indexer=None,
) -> None:
    """
    Soft-delete a page.

    Notes:
    - Blocks keep their rows; a deleted page's blocks are excluded from
      rendering and indexing because every read path filters on the page.
    - The page's search index entry is dropped.
    """
    page = PageLookup(session).get_owned_page(tenant_id, page_id)

    with unit_of_work(session):
        page.soft_delete()

        log_action(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            action="page.delete",
            entity_type="page",
            entity_id=page_id,
            payload={},
        )

    if indexer is not None:
        try:
            indexer.remove(page_id)
        except Exception:
            logger.exception("Failed to drop index entry for page %s", page_id)
