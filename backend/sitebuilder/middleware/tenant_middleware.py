from flask import request, g, jsonify
from sitebuilder.models.tenant import Tenant

# Endpoints served without a tenant context
TENANT_EXEMPT_ENDPOINTS = {"v1.health_check", "openapi_cms", "static"}

def tenant_middleware(app):
    @app.before_request
    def load_tenant():
        if request.endpoint in TENANT_EXEMPT_ENDPOINTS or (
            request.blueprint and request.blueprint.startswith("swagger_ui")
        ):
            return None

        tenant_id = request.headers.get('X-Tenant-ID')
        if not tenant_id:
            return jsonify({"error": "X-Tenant-ID header is missing"}), 400

        tenant = Tenant.query.filter_by(id=tenant_id, is_active=True).first()
        if not tenant:
            return jsonify({"error": "Invalid tenant"}), 404

        # Attach tenant to global context
        g.current_tenant = tenant
