# app/routes/api.py
from __future__ import annotations

import logging
from flask import Blueprint, current_app, jsonify, request

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")

# Methods the proxy answers itself; anything else is turned into a JSON 405 by the app
PROXY_METHODS = ["GET", "PATCH", "OPTIONS", "POST", "PUT", "DELETE"]


@api_bp.route("/vendors", methods=PROXY_METHODS)
def vendors():
    """Proxy to SheetDB: GET reads all sheets, PATCH updates one vendor row."""
    body = request.get_json(silent=True) if request.method == "PATCH" else None
    result = current_app.extensions["vendor_proxy"].handle(request.method, body)
    logger.debug(f"{request.method} /api/vendors -> {result.status}")

    if result.json is None:
        return "", result.status
    return jsonify(result.json), result.status
