from flask import jsonify, request


def form_errors(form):
    return jsonify({'errors': form.errors}), 400


def json_body():
    """The request JSON object, or an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
