from flask import jsonify, current_app

from webserver.exceptions import APIError


def init_error_handlers(app):

    @app.errorhandler(APIError)
    def api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify_error(error)

    @app.errorhandler(401)
    def unauthorized(error):
        return jsonify_error(error)

    @app.errorhandler(403)
    def forbidden(error):
        return jsonify_error(error)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify_error(error)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify_error(error)

    @app.errorhandler(500)
    def internal_server_error(error):
        # The error parameter here could be any Exception, not a nice
        # werkzeug exception like in other error handlers.
        # We want a basic message and no additional stuff (like a stack trace).
        # Developers get reports through sentry and the log file.
        current_app.logger.error("Internal server error: %s", getattr(error, "original_exception", error))
        error = Exception("An unknown error occurred")
        error.code = 500
        return jsonify_error(error)


def jsonify_error(error, code=None):
    if hasattr(error, 'description'):
        message = error.description
    elif len(error.args):
        message = str(error.args[0])
    else:
        message = "unknown error"
    api_error = APIError(message, getattr(error, 'code', code))
    return jsonify(api_error.to_dict()), api_error.status_code
