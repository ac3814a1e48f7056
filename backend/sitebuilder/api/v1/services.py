# sitebuilder/api/v1/services.py
"""
Composition root for request handlers: each component gets the
request-scoped session handed to its constructor.
"""
from flask import current_app

from sitebuilder.application.cms.block_store import BlockStore
from sitebuilder.application.cms.page_aggregator import PageAggregator
from sitebuilder.application.cms.page_lookup import PageLookup
from sitebuilder.application.cms.search_index import SearchIndexSynchronizer
from sitebuilder.domain.blocks.registry import default_registry
from sitebuilder.domain.blocks.renderer import BlockRenderer
from sitebuilder.extensions import db
from sitebuilder.utils.media import MediaStorage


def page_lookup() -> PageLookup:
    return PageLookup(db.session)


def block_renderer() -> BlockRenderer:
    return BlockRenderer(default_registry)


def search_indexer() -> SearchIndexSynchronizer:
    return SearchIndexSynchronizer(db.session, page_lookup(), block_renderer())


def media_storage() -> MediaStorage:
    return MediaStorage(current_app.config["UPLOAD_FOLDER"])


def block_store() -> BlockStore:
    return BlockStore(
        db.session,
        registry=default_registry,
        lookup=page_lookup(),
        indexer=search_indexer(),
        storage=media_storage(),
    )


def page_aggregator() -> PageAggregator:
    return PageAggregator(page_lookup(), block_renderer())
