# sitebuilder/application/cms/search_index.py
from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from markupsafe import Markup, escape
from sqlalchemy import and_, delete, or_, select

from sitebuilder.domain.blocks.renderer import BlockRenderer
from sitebuilder.domain.exceptions import CmsError
from sitebuilder.models.page import Page
from sitebuilder.models.search_index_entry import SearchIndexEntry
from sitebuilder.utils.transaction import unit_of_work
from .page_lookup import PageLookup

logger = logging.getLogger(__name__)

DEFAULT_RESULT_LIMIT = 50
SNIPPET_RADIUS = 60

TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> List[str]:
    return TOKEN_RE.findall((text or "").lower())


@dataclass
class SearchResult:
    page_id: str
    title: str
    slug: str
    snippet: Markup
    rank: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "page_id": self.page_id,
            "title": self.title,
            "url": self.slug,
            "snippet": str(self.snippet),
            "rank": self.rank,
        }


def _token_pattern(tokens: List[str]) -> "re.Pattern[str]":
    # Whole tokens only, bounded the way TOKEN_RE splits text
    alternatives = "|".join(re.escape(t) for t in sorted(set(tokens), key=len, reverse=True))
    return re.compile(rf"(?<![^\W_])(?:{alternatives})(?![^\W_])", re.IGNORECASE)


def build_snippet(content: str, tokens: List[str], radius: int = SNIPPET_RADIUS) -> Markup:
    """
    Escaped excerpt around the first token hit, with every hit wrapped
    in <mark>.
    """
    if not content:
        return Markup("")

    pattern = _token_pattern(tokens) if tokens else None
    first_hit = pattern.search(content) if pattern else None
    first = first_hit.start() if first_hit else 0

    start = max(first - radius, 0)
    end = min(first + radius, len(content))

    pieces = []
    cursor = start
    if pattern is not None:
        for match in pattern.finditer(content, start, end):
            pieces.append(escape(content[cursor:match.start()]))
            pieces.append(Markup("<mark>{}</mark>").format(match.group(0)))
            cursor = match.end()
    pieces.append(escape(content[cursor:end]))

    snippet = Markup("").join(pieces)
    if start > 0:
        snippet = Markup("...") + snippet
    if end < len(content):
        snippet += Markup("...")
    return snippet


class SearchIndexSynchronizer:
    """
    Keeps one SearchIndexEntry per active page.

    Entries are regenerated from scratch (delete, then insert) every time
    a block changes; they are never patched in place.
    """

    def __init__(self, session, lookup: Optional[PageLookup] = None, renderer: Optional[BlockRenderer] = None):
        self.session = session
        self.lookup = lookup or PageLookup(session)
        self.renderer = renderer or BlockRenderer()

    def page_text(self, page_id: str) -> str:
        record = self.lookup.lookup(page_id)
        parts = []
        for block in record.blocks:
            try:
                text = self.renderer.extract_text(block.type, block.payload)
            except CmsError:
                logger.warning("Skipping block %s of page %s while indexing", block.id, page_id)
                continue
            if text:
                parts.append(text)
        return " ".join(parts)

    def reindex(self, page_id: str) -> Optional[SearchIndexEntry]:
        with unit_of_work(self.session):
            self.session.execute(
                delete(SearchIndexEntry).where(SearchIndexEntry.page_id == page_id)
            )

            page = self.lookup.find_page(page_id)
            if page is None:
                return None

            entry = SearchIndexEntry()
            entry.page_id = page.id
            entry.tenant_id = page.tenant_id
            entry.title = page.title
            entry.content = self.page_text(page.id)
            self.session.add(entry)

        logger.debug("Reindexed page %s", page_id)
        return entry

    def remove(self, page_id: str) -> None:
        with unit_of_work(self.session):
            self.session.execute(
                delete(SearchIndexEntry).where(SearchIndexEntry.page_id == page_id)
            )

    def rebuild_tenant(self, tenant_id: str) -> int:
        with unit_of_work(self.session):
            self.session.execute(
                delete(SearchIndexEntry).where(SearchIndexEntry.tenant_id == tenant_id)
            )

        page_ids = self.session.execute(
            select(Page.id).where(Page.tenant_id == tenant_id, Page.deleted_at.is_(None))
        ).scalars().all()

        indexed = 0
        for page_id in page_ids:
            try:
                self.reindex(page_id)
            except Exception:
                logger.exception("Failed to index page %s during rebuild of tenant %s", page_id, tenant_id)
                continue
            indexed += 1

        logger.info("Rebuilt search index for tenant %s (%d of %d pages)", tenant_id, indexed, len(page_ids))
        return indexed

    def search(
        self,
        tenant_id: str,
        query: str,
        *,
        published_only: bool = False,
        limit: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Every query token must occur as a whole token of the title or the
        content; the ILIKE filter only narrows the candidate rows. Results
        never cross the tenant boundary.
        """
        tokens = tokenize(query)
        if not tokens:
            return []

        token_filters = [
            or_(
                SearchIndexEntry.title.ilike(f"%{token}%"),
                SearchIndexEntry.content.ilike(f"%{token}%"),
            )
            for token in tokens
        ]

        stmt = (
            select(SearchIndexEntry, Page)
            .join(Page, Page.id == SearchIndexEntry.page_id)
            .where(
                SearchIndexEntry.tenant_id == tenant_id,
                Page.tenant_id == tenant_id,
                Page.deleted_at.is_(None),
                and_(*token_filters),
            )
        )
        if published_only:
            stmt = stmt.where(Page.published.is_(True))

        results = []
        for entry, page in self.session.execute(stmt).all():
            words = Counter(tokenize(f"{entry.title} {entry.content}"))
            if any(token not in words for token in tokens):
                continue

            results.append(
                SearchResult(
                    page_id=page.id,
                    title=entry.title,
                    slug=page.slug,
                    snippet=build_snippet(entry.content, tokens),
                    rank=sum(words[token] for token in set(tokens)),
                )
            )

        results.sort(key=lambda r: (-r.rank, r.title.lower()))
        return results[: limit or DEFAULT_RESULT_LIMIT]
