from sitebuilder.models.block import Block


def _editor_url(page):
    return f"/admin/pages/{page.id}/edit"


def test_health_needs_no_tenant(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "service": "sitebuilder"}


def test_missing_tenant_header(client):
    response = client.get("/api/v1/search?q=x")
    assert response.status_code == 400


def test_create_block_redirects_to_editor(client, auth_headers, tenant_a, make_page, session):
    page = make_page(tenant_a)

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks",
        data={"type": "button"},
        headers=auth_headers(tenant_a),
    )

    assert response.status_code == 302
    assert response.headers["Location"].endswith(_editor_url(page))

    block = session.query(Block).filter_by(page_id=page.id).one()
    assert block.payload == {"text": "Click Here", "url": "", "style": "primary"}


def test_create_block_requires_type(client, auth_headers, tenant_a, make_page):
    page = make_page(tenant_a)

    response = client.post(f"/api/v1/pages/{page.id}/blocks", data={}, headers=auth_headers(tenant_a))

    assert response.status_code == 400
    assert response.get_json()["error"] == "Block type is required"


def test_create_block_rejects_unknown_type(client, auth_headers, tenant_a, make_page):
    page = make_page(tenant_a)

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks",
        data={"type": "carousel"},
        headers=auth_headers(tenant_a),
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "InvalidBlockType"


def test_update_move_and_list(client, auth_headers, store, tenant_a, make_page):
    page = make_page(tenant_a)
    first = store.create(tenant_a.id, page.id, "text")
    second = store.create(tenant_a.id, page.id, "spacer")
    headers = auth_headers(tenant_a)

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks/{first.id}",
        data={"content": "Hello"},
        headers=headers,
    )
    assert response.status_code == 302

    response = client.post(f"/api/v1/pages/{page.id}/blocks/{second.id}/move-up", headers=headers)
    assert response.status_code == 302

    blocks = client.get(f"/api/v1/pages/{page.id}/blocks", headers=headers).get_json()["blocks"]
    assert [b["id"] for b in blocks] == [second.id, first.id]
    assert blocks[1]["payload"] == {"content": "Hello"}


def test_update_accepts_json(client, auth_headers, store, tenant_a, make_page):
    page = make_page(tenant_a)
    block = store.create(tenant_a.id, page.id, "spacer")

    response = client.put(
        f"/api/v1/pages/{page.id}/blocks/{block.id}",
        json={"height": 9999},
        headers=auth_headers(tenant_a),
    )

    assert response.status_code == 302
    assert store.get_block(tenant_a.id, page.id, block.id).payload == {"height": 500}


def test_stale_update_is_rejected(client, auth_headers, store, tenant_a, make_page):
    page = make_page(tenant_a)
    block = store.create(tenant_a.id, page.id, "text")
    headers = auth_headers(tenant_a)
    headers["If-Unmodified-Since"] = "Mon, 01 Jan 2001 00:00:00 GMT"

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks/{block.id}",
        data={"content": "late"},
        headers=headers,
    )

    assert response.status_code == 409
    assert response.get_json()["error"] == "EditConflict"


def test_bad_precondition_header(client, auth_headers, store, tenant_a, make_page):
    page = make_page(tenant_a)
    block = store.create(tenant_a.id, page.id, "text")
    headers = auth_headers(tenant_a)
    headers["If-Unmodified-Since"] = "not a date"

    response = client.post(f"/api/v1/pages/{page.id}/blocks/{block.id}", data={"content": "x"}, headers=headers)

    assert response.status_code == 400
    assert response.get_json()["error"] == "InvalidPrecondition"


def test_delete_block(client, auth_headers, store, tenant_a, make_page):
    page = make_page(tenant_a)
    block = store.create(tenant_a.id, page.id, "text")

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks/{block.id}/delete",
        headers=auth_headers(tenant_a),
    )

    assert response.status_code == 302
    assert store.list_blocks(tenant_a.id, page.id) == []


def test_other_site_gets_403(client, auth_headers, store, tenant_a, tenant_b, make_page):
    page = make_page(tenant_a)
    block = store.create(tenant_a.id, page.id, "text")

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks/{block.id}",
        data={"content": "defaced"},
        headers=auth_headers(tenant_b),
    )

    assert response.status_code == 403
    assert response.get_json()["error"] == "AccessDenied"
    assert store.get_block(tenant_a.id, page.id, block.id).payload == {"content": ""}


def test_token_for_another_tenant_is_refused(client, auth_headers, tenant_a, tenant_b, make_page):
    page = make_page(tenant_a)

    response = client.get(
        f"/api/v1/pages/{page.id}/blocks",
        headers=auth_headers(tenant_b, header_tenant=tenant_a),
    )

    assert response.status_code == 403
    assert response.get_json()["error"] == "Tenant mismatch"


def test_admin_role_required(client, auth_headers, tenant_a, make_page):
    page = make_page(tenant_a)

    response = client.get(f"/api/v1/pages/{page.id}/blocks", headers=auth_headers(tenant_a, role="viewer"))

    assert response.status_code == 403


def test_unknown_block_is_404(client, auth_headers, tenant_a, make_page):
    page = make_page(tenant_a)

    response = client.post(
        f"/api/v1/pages/{page.id}/blocks/nope/move-down",
        headers=auth_headers(tenant_a),
    )

    assert response.status_code == 404
    assert response.get_json()["error"] == "BlockNotFound"


def test_create_and_delete_page(client, auth_headers, tenant_a):
    headers = auth_headers(tenant_a)

    response = client.post("/api/v1/pages", json={"title": "About", "slug": "about"}, headers=headers)
    assert response.status_code == 201
    page_id = response.get_json()["id"]

    duplicate = client.post("/api/v1/pages", json={"title": "Again", "slug": "about"}, headers=headers)
    assert duplicate.status_code == 409

    page = client.get(f"/api/v1/pages/{page_id}", headers=headers).get_json()
    assert page["slug"] == "about"
    assert page["blocks"] == []

    assert client.delete(f"/api/v1/pages/{page_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/pages/{page_id}", headers=headers).status_code == 404


def test_public_page_renders_html(client, store, tenant_a, make_page):
    page = make_page(tenant_a, title="Welcome", slug="welcome")
    block = store.create(tenant_a.id, page.id, "text")
    store.update(tenant_a.id, page.id, block.id, {"content": "<script>x</script>"})

    response = client.get("/api/v1/site/pages/welcome", headers={"X-Tenant-ID": tenant_a.id})

    assert response.status_code == 200
    assert response.content_type.startswith("text/html")
    body = response.get_data(as_text=True)
    assert "<h1>Welcome</h1>" in body
    assert "&lt;script&gt;x&lt;/script&gt;" in body
    assert "<script>" not in body


def test_unpublished_and_foreign_pages_are_404(client, tenant_a, tenant_b, make_page):
    make_page(tenant_a, slug="draft", published=False)
    make_page(tenant_b, slug="theirs")

    assert client.get("/api/v1/site/pages/draft", headers={"X-Tenant-ID": tenant_a.id}).status_code == 404
    assert client.get("/api/v1/site/pages/theirs", headers={"X-Tenant-ID": tenant_a.id}).status_code == 404


def test_public_search(client, store, tenant_a, tenant_b, make_page):
    page = make_page(tenant_a, title="Trips", slug="trips")
    block = store.create(tenant_a.id, page.id, "text")
    store.update(tenant_a.id, page.id, block.id, {"content": "Incredible journeys await"})
    other = make_page(tenant_b, title="Trips", slug="trips")
    block = store.create(tenant_b.id, other.id, "text")
    store.update(tenant_b.id, other.id, block.id, {"content": "Incredible journeys"})

    response = client.get("/api/v1/search?q=incredible+journeys", headers={"X-Tenant-ID": tenant_a.id})

    assert response.status_code == 200
    data = response.get_json()
    assert data["count"] == 1
    assert data["results"][0]["page_id"] == page.id
    assert data["results"][0]["url"] == "trips"


def test_search_requires_query(client, tenant_a):
    response = client.get("/api/v1/search", headers={"X-Tenant-ID": tenant_a.id})
    assert response.status_code == 400


def test_search_feature_toggle(client, make_tenant):
    tenant = make_tenant("quiet", enable_search=False)

    response = client.get("/api/v1/search?q=x", headers={"X-Tenant-ID": tenant.id})

    assert response.status_code == 403
