from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sitebuilder.domain.exceptions import PersistenceFailure
from sitebuilder.models.page import Page
from sitebuilder.domain.invariants.page import assert_page
from sitebuilder.utils.audit import log_action
from sitebuilder.utils.transaction import unit_of_work


def create_page(
    session,
    *,
    tenant_id: str,
    data: Dict[str, Any],
    actor_id: Optional[str] = None,
    indexer=None,
) -> Page:
    """
    Create a new page for a tenant. Pages start empty; blocks are added
    through the BlockStore.

    Edge cases handled:
    - Missing required fields
    - Duplicate slug per tenant
    - Invariant violations
    """

    title: str | None = data.get("title")
    slug: str | None = data.get("slug")

    if not title or not slug:
        raise ValueError("Both title and slug are required")

    duplicate = session.execute(
        select(Page.id).where(Page.tenant_id == tenant_id, Page.slug == slug)
    ).first()
    if duplicate:
        raise ValueError("A page with this slug already exists")

    page = Page()
    page.tenant_id = tenant_id
    page.title = title
    page.slug = slug
    page.published = bool(data.get("published", False))

    try:
        with unit_of_work(session):
            session.add(page)
            session.flush()  # ensures page.id is available

            assert_page(page)

            log_action(
                session,
                tenant_id=tenant_id,
                actor_id=actor_id,
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                    "published": page.published,
                },
            )
    except PersistenceFailure as exc:
        # Lost a race on the (tenant_id, slug) unique constraint
        if isinstance(exc.__cause__, IntegrityError):
            raise ValueError("A page with this slug already exists") from exc
        raise

    if indexer is not None:
        indexer.reindex(page.id)

    return page
