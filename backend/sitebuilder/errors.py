from flask import jsonify
from sitebuilder.domain.exceptions import CmsError
from sitebuilder.domain.invariants.exceptions import InvariantViolation

def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(CmsError)
    def handle_cms_error(error):
        if error.status_code >= 500:
            app.logger.error("%s: %s", type(error).__name__, error)

        response = jsonify({
            "error": type(error).__name__,
            "message": str(error)
        })
        response.status_code = error.status_code
        return response
