# sitebuilder/api/v1/pages.py
from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from sitebuilder.application.cms.create_page import create_page as create_page_use_case
from sitebuilder.application.cms.delete_page import delete_page as delete_page_use_case
from sitebuilder.extensions import db
from sitebuilder.normalizers.page import normalize_page
from sitebuilder.utils.decorators import (
    current_actor_id,
    feature_enabled,
    roles_required,
    tenant_required,
)
from . import v1_bp
from .services import page_lookup, search_indexer

# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def create_page():
    tenant = g.current_tenant
    data = request.get_json(silent=True) or {}

    if not data.get("title") or not data.get("slug"):
        return jsonify({"error": "Title and slug are required"}), 400

    try:
        page = create_page_use_case(
            db.session,
            tenant_id=tenant.id,
            data=data,
            actor_id=current_actor_id(),
            indexer=search_indexer(),
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 409

    return jsonify({
        "id": page.id,
        "message": "Page created successfully"
    }), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def get_page(page_id):
    tenant = g.current_tenant
    lookup = page_lookup()
    page = lookup.get_owned_page(tenant.id, page_id)

    return jsonify(normalize_page(page, lookup.active_blocks(page.id), admin=True))


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def delete_page(page_id):
    tenant = g.current_tenant

    delete_page_use_case(
        db.session,
        tenant_id=tenant.id,
        page_id=page_id,
        actor_id=current_actor_id(),
        indexer=search_indexer(),
    )

    return jsonify({"message": "Page deleted successfully"}), 200
