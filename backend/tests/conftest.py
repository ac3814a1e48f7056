from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask_jwt_extended import create_access_token

from sitebuilder import create_app
from sitebuilder.application.cms.block_store import BlockStore
from sitebuilder.application.cms.page_lookup import PageLookup
from sitebuilder.application.cms.search_index import SearchIndexSynchronizer
from sitebuilder.extensions import db
from sitebuilder.models.page import Page
from sitebuilder.models.tenant import Tenant
from sitebuilder.utils.media import MediaStorage


@pytest.fixture
def app(tmp_path: Path) -> Iterator[Flask]:
    """Fresh in-memory database per test, uploads under tmp_path."""

    app = create_app("testing")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    with app.app_context():
        db.create_all()
        try:
            yield app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture
def session(app: Flask):
    return db.session


@pytest.fixture
def client(app: Flask):
    return app.test_client()


@pytest.fixture
def make_tenant(session) -> Callable[..., Tenant]:
    def _make(slug: str, **overrides) -> Tenant:
        tenant = Tenant()
        tenant.name = overrides.pop("name", slug.title())
        tenant.slug = slug
        tenant.is_active = overrides.pop("is_active", True)
        for key, value in overrides.items():
            setattr(tenant, key, value)
        session.add(tenant)
        session.commit()
        return tenant

    return _make


@pytest.fixture
def tenant_a(make_tenant) -> Tenant:
    return make_tenant("acme")


@pytest.fixture
def tenant_b(make_tenant) -> Tenant:
    return make_tenant("globex")


@pytest.fixture
def make_page(session) -> Callable[..., Page]:
    def _make(tenant: Tenant, title: str = "Home", slug: str = "home", published: bool = True) -> Page:
        page = Page()
        page.tenant_id = tenant.id
        page.title = title
        page.slug = slug
        page.published = published
        session.add(page)
        session.commit()
        return page

    return _make


@pytest.fixture
def indexer(session) -> SearchIndexSynchronizer:
    return SearchIndexSynchronizer(session)


@pytest.fixture
def storage(app: Flask) -> MediaStorage:
    return MediaStorage(app.config["UPLOAD_FOLDER"])


@pytest.fixture
def store(session, indexer, storage) -> BlockStore:
    return BlockStore(
        session,
        lookup=PageLookup(session),
        indexer=indexer,
        storage=storage,
    )


@pytest.fixture
def auth_headers(app: Flask) -> Callable[..., dict]:
    """Admin JWT for ``tenant`` plus the tenant header.

    ``header_tenant`` lets a test send a token for one site against another.
    """

    def _headers(tenant: Tenant, header_tenant: Tenant | None = None, role: str = "admin") -> dict:
        token = create_access_token(
            identity="user-1",
            additional_claims={"tenant_id": tenant.id, "role": role},
        )
        return {
            "Authorization": f"Bearer {token}",
            "X-Tenant-ID": (header_tenant or tenant).id,
        }

    return _headers
