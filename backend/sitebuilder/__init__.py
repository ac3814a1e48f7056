import os

from flask import Flask, current_app, send_file
from flask_swagger_ui import get_swaggerui_blueprint

from .api.v1 import v1_bp
from .cli import register_cli
from .config import config_by_name
from .errors import register_error_handlers
from .extensions import db, jwt, migrate
from .middleware.tenant_middleware import tenant_middleware

# Model modules register their tables on import
from .models import audit_log, block, media_item, page, search_index_entry, tenant  # noqa: F401

OPENAPI_URL = "/openapi/cms.yaml"
SWAGGER_URL = "/swagger"


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # Module loggers (sitebuilder.*) inherit this level
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # Tenant resolution, routes, errors, commands
    # -------------------------------------------------
    tenant_middleware(app)
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_cli(app)

    _register_api_docs(app)

    app.logger.debug("Site builder app created with %s config", config_name)
    return app


def _register_api_docs(app: Flask) -> None:
    """OpenAPI document and Swagger UI, both served without a tenant."""

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        openapi_path = os.path.join(current_app.root_path, "api", "v1", "cms_openapi.yaml")
        if not os.path.exists(openapi_path):
            raise FileNotFoundError("cms_openapi.yaml not found")

        return send_file(openapi_path, mimetype="application/yaml", as_attachment=False)

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        OPENAPI_URL,
        config={
            "app_name": "Site Builder API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )
    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)
