from flask import jsonify


def success(status_code=200, message=None, **data):
    body = {"status": "success", "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status_code


def listing(key, rows, message=None):
    body = {"status": "success", "results": len(rows), "data": {key: rows}}
    if message:
        body["message"] = message
    return jsonify(body), 200


def fail(status_code, message, details=None):
    body = {"status": "fail", "message": message}
    if details:
        body["details"] = details
    return jsonify(body), status_code


def no_content():
    return "", 204
