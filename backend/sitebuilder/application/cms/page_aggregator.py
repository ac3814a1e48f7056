# sitebuilder/application/cms/page_aggregator.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from flask import render_template
from markupsafe import Markup

from sitebuilder.domain.blocks.renderer import BlockRenderer
from sitebuilder.domain.exceptions import CmsError
from sitebuilder.models.page import Page
from .page_lookup import PageLookup

logger = logging.getLogger(__name__)

PageTemplate = Callable[[Page, Markup], str]


def default_page_template(page: Page, content: Markup) -> str:
    return render_template("public/page.html", page=page, content=content)


@dataclass
class RenderedPage:
    page: Page
    fragments: List[Markup] = field(default_factory=list)
    failed_block_ids: List[str] = field(default_factory=list)

    @property
    def content(self) -> Markup:
        return Markup("\n").join(self.fragments)


class PageAggregator:
    """
    Read path for public pages: ordered blocks in, one HTML stream out.

    A block that fails to render is logged and left out; the rest of the
    page still renders.
    """

    def __init__(
        self,
        lookup: PageLookup,
        renderer: Optional[BlockRenderer] = None,
        template: PageTemplate = default_page_template,
    ):
        self.lookup = lookup
        self.renderer = renderer or BlockRenderer()
        self.template = template

    def render(self, page_id: str) -> RenderedPage:
        record = self.lookup.lookup(page_id)
        rendered = RenderedPage(page=record.page)

        for block in record.blocks:
            try:
                fragment = self.renderer.render(block.type, block.payload)
            except CmsError as exc:
                logger.error("Error rendering block %s on page %s: %s", block.id, page_id, exc)
                rendered.failed_block_ids.append(block.id)
                continue
            rendered.fragments.append(fragment)

        return rendered

    def render_html(self, page_id: str) -> str:
        rendered = self.render(page_id)
        return self.template(rendered.page, rendered.content)
