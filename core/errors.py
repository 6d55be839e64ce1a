from core.imports import jsonify, HTTPException, SQLAlchemyError
from core.extensions import db, jwt
from core.logger import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Error raised by handlers and serialized into the error envelope."""

    status_code = 500
    kind = "server_error"

    def __init__(self, message=None, status_code=None, errors=None):
        super().__init__(message or "Something went wrong.")
        self.message = message or "Something went wrong."
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []


class ValidationError(ApiError):
    status_code = 400
    kind = "validation_error"


class AuthenticationError(ApiError):
    status_code = 401
    kind = "authentication_error"


class ForbiddenError(ApiError):
    status_code = 403
    kind = "forbidden"


class NotFoundError(ApiError):
    status_code = 404
    kind = "not_found"


class ConflictError(ApiError):
    status_code = 409
    kind = "conflict"


class PaymentFailed(ApiError):
    status_code = 500
    kind = "payment_failed"


class ServerError(ApiError):
    pass


def error_envelope(status_code, message, errors=None):
    return jsonify({
        "statusCode": status_code,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors or [],
    }), status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        errors = error.errors or [{"kind": error.kind}]
        return error_envelope(error.status_code, error.message, errors)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_envelope(error.code, error.description)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception("Database error")
        return error_envelope(500, "A database error occurred.")

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error")
        return error_envelope(500, "Something went wrong.")


def _unauthorized(message):
    return error_envelope(401, message, [{"kind": AuthenticationError.kind}])


@jwt.unauthorized_loader
def missing_token_callback(reason):
    return _unauthorized("Unauthorized request")


@jwt.invalid_token_loader
def invalid_token_callback(reason):
    return _unauthorized("Invalid Access Token")


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return _unauthorized("Access token has expired")


@jwt.user_lookup_error_loader
def user_lookup_error_callback(jwt_header, jwt_payload):
    return _unauthorized("Invalid Access Token")
