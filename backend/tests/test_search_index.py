from sitebuilder.application.cms.delete_page import delete_page
from sitebuilder.application.cms.search_index import SearchIndexSynchronizer, build_snippet, tokenize
from sitebuilder.models.search_index_entry import SearchIndexEntry


def _page_with_text(store, make_page, tenant, text, **page_kwargs):
    page = make_page(tenant, **page_kwargs)
    block = store.create(tenant.id, page.id, "text")
    store.update(tenant.id, page.id, block.id, {"content": text})
    return page


def test_tokenize():
    assert tokenize("Incredible, JOURNEYS!  under_score") == ["incredible", "journeys", "under", "score"]
    assert tokenize("") == []


def test_block_changes_are_indexed(store, tenant_a, make_page, session):
    page = _page_with_text(store, make_page, tenant_a, "Incredible journeys await")

    entry = session.query(SearchIndexEntry).filter_by(page_id=page.id).one()
    assert entry.title == "Home"
    assert entry.content == "Incredible journeys await"
    assert entry.tenant_id == tenant_a.id


def test_search_never_crosses_tenants(store, indexer, tenant_a, tenant_b, make_page):
    page_a = _page_with_text(store, make_page, tenant_a, "Incredible journeys await")
    _page_with_text(store, make_page, tenant_b, "Incredible journeys for everyone")

    results = indexer.search(tenant_a.id, "incredible journeys")

    assert [r.page_id for r in results] == [page_a.id]
    assert "<mark>Incredible</mark> <mark>journeys</mark>" in results[0].snippet


def test_every_token_must_match(store, indexer, tenant_a, make_page):
    _page_with_text(store, make_page, tenant_a, "Incredible journeys await")

    assert indexer.search(tenant_a.id, "incredible sandwiches") == []
    assert indexer.search(tenant_a.id, "   ") == []


def test_results_ranked_by_occurrences(store, indexer, tenant_a, make_page):
    once = _page_with_text(store, make_page, tenant_a, "travel once", title="Alpha", slug="alpha")
    thrice = _page_with_text(store, make_page, tenant_a, "travel travel travel", title="Beta", slug="beta")

    results = indexer.search(tenant_a.id, "travel")

    assert [r.page_id for r in results] == [thrice.id, once.id]
    assert results[0].to_dict()["url"] == "beta"


def test_published_only_filter(store, indexer, tenant_a, make_page):
    _page_with_text(store, make_page, tenant_a, "draft ideas", published=False)

    assert len(indexer.search(tenant_a.id, "draft")) == 1
    assert indexer.search(tenant_a.id, "draft", published_only=True) == []


def test_deleted_page_leaves_the_index(store, indexer, tenant_a, make_page, session):
    page = _page_with_text(store, make_page, tenant_a, "Incredible journeys await")

    delete_page(session, tenant_id=tenant_a.id, page_id=page.id, indexer=indexer)

    assert indexer.search(tenant_a.id, "journeys") == []
    assert session.query(SearchIndexEntry).filter_by(page_id=page.id).count() == 0


def test_deleted_block_text_is_dropped(store, indexer, tenant_a, make_page):
    page = make_page(tenant_a)
    keep = store.create(tenant_a.id, page.id, "text")
    store.update(tenant_a.id, page.id, keep.id, {"content": "keep me"})
    drop = store.create(tenant_a.id, page.id, "heading")
    store.update(tenant_a.id, page.id, drop.id, {"level": "2", "text": "vanishing"})

    assert indexer.search(tenant_a.id, "vanishing")

    store.delete(tenant_a.id, page.id, drop.id)

    assert indexer.search(tenant_a.id, "vanishing") == []
    assert indexer.search(tenant_a.id, "keep")


def test_index_failure_does_not_undo_the_mutation(store, tenant_a, make_page, monkeypatch, caplog):
    page = make_page(tenant_a)
    block = store.create(tenant_a.id, page.id, "text")

    def broken(self, page_id):
        raise RuntimeError("index offline")

    monkeypatch.setattr(SearchIndexSynchronizer, "reindex", broken)

    store.update(tenant_a.id, page.id, block.id, {"content": "Saved anyway"})

    assert store.get_block(tenant_a.id, page.id, block.id).payload == {"content": "Saved anyway"}
    assert "Failed to index page" in caplog.text


def test_rebuild_tenant(store, indexer, tenant_a, make_page, session):
    page = _page_with_text(store, make_page, tenant_a, "Incredible journeys await")
    session.query(SearchIndexEntry).delete()
    session.commit()

    assert indexer.search(tenant_a.id, "journeys") == []
    assert indexer.rebuild_tenant(tenant_a.id) == 1
    assert [r.page_id for r in indexer.search(tenant_a.id, "journeys")] == [page.id]


def test_snippet_is_escaped_and_trimmed():
    content = "x" * 100 + " <b>needle</b> " + "y" * 100

    snippet = build_snippet(content, ["needle"], radius=20)

    assert snippet.startswith("...")
    assert snippet.endswith("...")
    assert "&lt;b&gt;<mark>needle</mark>&lt;/b&gt;" in snippet


def test_partial_words_do_not_match(store, indexer, tenant_a, make_page):
    _page_with_text(store, make_page, tenant_a, "incredible journeys")

    assert indexer.search(tenant_a.id, "our") == []
    assert indexer.search(tenant_a.id, "journey") == []
    assert len(indexer.search(tenant_a.id, "journeys")) == 1


def test_rank_counts_whole_tokens_only(store, indexer, tenant_a, make_page):
    page = _page_with_text(store, make_page, tenant_a, "tour our tours, our way")

    [result] = indexer.search(tenant_a.id, "our")

    assert result.page_id == page.id
    assert result.rank == 2
    assert str(result.snippet) == "tour <mark>our</mark> tours, <mark>our</mark> way"


def test_rebuild_continues_past_a_failing_page(store, indexer, tenant_a, make_page, session, monkeypatch, caplog):
    broken = _page_with_text(store, make_page, tenant_a, "lost voyages", title="Broken", slug="broken")
    fine = _page_with_text(store, make_page, tenant_a, "found voyages", title="Fine", slug="fine")

    original_reindex = SearchIndexSynchronizer.reindex

    def flaky(self, page_id):
        if page_id == broken.id:
            raise RuntimeError("bad block data")
        return original_reindex(self, page_id)

    monkeypatch.setattr(SearchIndexSynchronizer, "reindex", flaky)

    assert indexer.rebuild_tenant(tenant_a.id) == 1
    assert [r.page_id for r in indexer.search(tenant_a.id, "voyages")] == [fine.id]
    assert f"Failed to index page {broken.id}" in caplog.text
