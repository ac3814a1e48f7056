# sitebuilder/api/v1/blocks.py
from flask import current_app, g, jsonify, redirect, request
from flask_jwt_extended import jwt_required
from sitebuilder.normalizers.block import normalize_block
from sitebuilder.utils.decorators import (
    current_actor_id,
    feature_enabled,
    roles_required,
    tenant_required,
)
from sitebuilder.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp
from .services import block_store


def _editor_redirect(page_id):
    return redirect(current_app.config["ADMIN_EDITOR_URL"].format(page_id=page_id))


def _request_fields():
    """Admin form posts and JSON bodies are both accepted."""
    if request.form:
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


# ------------------------
# Blocks
# ------------------------
@v1_bp.route("/pages/<page_id>/blocks", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def list_blocks(page_id):
    tenant = g.current_tenant
    blocks = block_store().list_blocks(tenant.id, page_id)

    return jsonify({
        "page_id": page_id,
        "blocks": [normalize_block(b, admin=True) for b in blocks],
    })


@v1_bp.route("/pages/<page_id>/blocks", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def create_block(page_id):
    tenant = g.current_tenant
    fields = _request_fields()

    block_type = fields.pop("type", None)
    if not block_type:
        return jsonify({"error": "Block type is required"}), 400

    # Only image blocks start from caller-supplied fields
    initial = fields if block_type == "image" and fields else None

    block_store().create(
        tenant.id,
        page_id,
        block_type,
        initial,
        actor_id=current_actor_id(),
    )

    return _editor_redirect(page_id)


@v1_bp.route("/pages/<page_id>/blocks/<block_id>", methods=["POST", "PUT"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def update_block(page_id, block_id):
    tenant = g.current_tenant
    store = block_store()

    block = store.get_block(tenant.id, page_id, block_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(block)

    upload = request.files.get("image")
    if upload is not None and not upload.filename:
        upload = None

    try:
        store.update(
            tenant.id,
            page_id,
            block_id,
            _request_fields(),
            upload=upload,
            actor_id=current_actor_id(),
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    return _editor_redirect(page_id)


@v1_bp.route("/pages/<page_id>/blocks/<block_id>", methods=["DELETE"])
@v1_bp.route("/pages/<page_id>/blocks/<block_id>/delete", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def delete_block(page_id, block_id):
    tenant = g.current_tenant
    block_store().delete(tenant.id, page_id, block_id, actor_id=current_actor_id())

    return _editor_redirect(page_id)


@v1_bp.route("/pages/<page_id>/blocks/<block_id>/move-up", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def move_block_up(page_id, block_id):
    tenant = g.current_tenant
    block_store().move_up(tenant.id, page_id, block_id, actor_id=current_actor_id())

    return _editor_redirect(page_id)


@v1_bp.route("/pages/<page_id>/blocks/<block_id>/move-down", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("cms")
def move_block_down(page_id, block_id):
    tenant = g.current_tenant
    block_store().move_down(tenant.id, page_id, block_id, actor_id=current_actor_id())

    return _editor_redirect(page_id)
