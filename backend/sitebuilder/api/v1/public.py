# sitebuilder/api/v1/public.py
from flask import current_app, g, jsonify, request
from sitebuilder.domain.exceptions import PageNotFound
from sitebuilder.utils.decorators import feature_enabled
from . import v1_bp
from .services import page_aggregator, page_lookup, search_indexer


@v1_bp.route("/site/", defaults={"slug": "/"}, methods=["GET"])
@v1_bp.route("/site/pages/<path:slug>", methods=["GET"])
def serve_page(slug):
    tenant = g.current_tenant
    page = page_lookup().find_by_slug(tenant.id, slug)

    if page is None or not page.published:
        raise PageNotFound(f"No published page at {slug!r}")

    html = page_aggregator().render_html(page.id)
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


@v1_bp.route("/search", methods=["GET"])
@feature_enabled("search")
def search_pages():
    tenant = g.current_tenant

    query = request.args.get("q", "").strip()
    if not query:
        return jsonify({"error": "Query parameter 'q' is required"}), 400

    results = search_indexer().search(
        tenant.id,
        query,
        published_only=True,
        limit=current_app.config["SEARCH_RESULT_LIMIT"],
    )

    return jsonify({
        "query": query,
        "count": len(results),
        "results": [r.to_dict() for r in results],
    })
