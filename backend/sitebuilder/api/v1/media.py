# sitebuilder/api/v1/media.py
from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from sitebuilder.application.cms.media_usage import find_image_usage, find_orphaned_media
from sitebuilder.extensions import db
from sitebuilder.utils.decorators import feature_enabled, roles_required, tenant_required
from . import v1_bp


@v1_bp.route("/media/usage", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def media_usage():
    tenant = g.current_tenant

    url = request.args.get("url", "").strip()
    if not url:
        return jsonify({"error": "Query parameter 'url' is required"}), 400

    usages = find_image_usage(db.session, tenant_id=tenant.id, image_url=url)
    return jsonify({
        "url": url,
        "usages": [u.to_dict() for u in usages],
    })


@v1_bp.route("/media/orphans", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def orphaned_media():
    tenant = g.current_tenant
    items = find_orphaned_media(db.session, tenant_id=tenant.id)

    return jsonify({"items": [item.to_dict() for item in items]})
