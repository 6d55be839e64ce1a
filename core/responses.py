from core.imports import jsonify, make_response


def api_response(data=None, message="Success", status_code=200):
    """Wraps a payload in the success envelope and returns a Response."""
    body = {
        "statusCode": status_code,
        "data": data if data is not None else {},
        "message": message,
        "success": status_code < 400,
    }
    return make_response(jsonify(body), status_code)
