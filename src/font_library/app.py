"""
Font Library REST API - Flask Application.

This module implements the HTTP surface of the font library: a Flask
application exposing the font families resource under the REST namespace
(default ``/wp/v2``).

Endpoints:
    GET     /wp/v2/font-families          List font families
    POST    /wp/v2/font-families          Create a font family
    OPTIONS /wp/v2/font-families          Describe the resource schema
    GET     /wp/v2/font-families/<id>     Get one font family
    POST|PUT|PATCH /wp/v2/font-families/<id>   Update a font family
    DELETE  /wp/v2/font-families/<id>     Delete a font family (force=true)
    OPTIONS /wp/v2/font-families/<id>     Describe the resource schema
    GET     /health                       Health check

Batch requests are not supported for font families; no batch route is
registered.

Authentication:
    Requests carry an API token as ``Authorization: Bearer <token>`` (or
    ``X-Internal-Token``). Tokens and their capabilities come from the
    auth section of config.yml. See auth.TokenAuthorizer.

Error Handling:
    Controllers raise rest.RestError subclasses which are rendered as

        {"code": "...", "message": "...", "data": {"status": 400}}

    Unknown routes answer with code "rest_no_route". Unexpected exceptions
    are logged with a traceback and answered with a generic 500.

Example:
    $ curl -X POST http://localhost:5000/wp/v2/font-families \\
           -H "Authorization: Bearer $TOKEN" \\
           -H "Content-Type: application/json" \\
           -d '{"font_family_settings": "{\\"name\\":\\"Arial\\",\\"slug\\":\\"arial\\",\\"fontFamily\\":\\"Arial, sans-serif\\"}"}'
"""
import logging
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import HTTPException

from auth import TokenAuthorizer
from config import load_config
from font_families import create_font_families_controller
from rest import InvalidJSONError, RestError, RestRequest, RestResponse
from storage import ContentStore, SQLiteContentStore

logger = logging.getLogger(__name__)


def _params_from_multidict(values: MultiDict) -> Dict[str, Any]:
    """Flatten query/form parameters; repeated keys and "key[]" become lists."""
    params: Dict[str, Any] = {}
    for key in values.keys():
        items = values.getlist(key)
        if key.endswith("[]"):
            params[key[:-2]] = items
        elif len(items) > 1:
            params[key] = items
        else:
            params[key] = items[0]
    return params


def _build_rest_request(url_params: Optional[Dict[str, Any]] = None) -> RestRequest:
    """Translate the current Flask request into a RestRequest."""
    authorizer = current_app.config["AUTHORIZER"]

    body: Dict[str, Any] = {}
    if request.method in ("POST", "PUT", "PATCH", "DELETE"):
        if request.is_json:
            payload = request.get_json(silent=True)
            if payload is None and request.get_data():
                raise InvalidJSONError("Invalid JSON body passed.")
            if payload is not None and not isinstance(payload, dict):
                raise InvalidJSONError("JSON body must be an object.")
            body = payload or {}
        else:
            body = _params_from_multidict(request.form)

    return RestRequest(
        method=request.method,
        route=request.path,
        url_params=url_params or {},
        body_params=body,
        query_params=_params_from_multidict(request.args),
        actor=authorizer.authenticate(request.headers),
        url_root=request.url_root,
    )


def _respond(rest_response: RestResponse):
    response = jsonify(rest_response.data)
    response.status_code = rest_response.status
    for name, value in rest_response.headers.items():
        response.headers[name] = value
    return response


def create_app(config: Optional[Dict[str, Any]] = None, store: Optional[ContentStore] = None,
               authorizer: Optional[TokenAuthorizer] = None) -> Flask:
    """Factory function to create and configure the Flask application.

    The factory pattern allows dependency injection of the content store and
    authorizer, keeping the app easy to test.

    Args:
        config: Optional configuration dictionary (if None, loaded from config.yml)
        store: Optional ContentStore (if None, an SQLiteContentStore at storage.path)
        authorizer: Optional authorizer (if None, built from the auth section)

    Returns:
        Configured Flask application instance

    Example:
        >>> app = create_app(config, store=SQLiteContentStore("/tmp/fonts"))
        >>> client = app.test_client()
    """
    app = Flask(__name__)

    if config is None:
        config = load_config()

    cors_config = config.get("cors", {})
    if cors_config.get("enabled", False):
        cors_origins = cors_config.get("origins", [])
        if cors_origins:
            CORS(app, origins=cors_origins)
            logger.info(f"CORS enabled for origins: {cors_origins}")
        else:
            logger.warning("CORS enabled but no origins configured")
    else:
        logger.info("CORS is disabled in configuration")

    if store is None:
        storage_path = config.get("storage", {}).get("path", "./data/font_library")
        store = SQLiteContentStore(storage_path)
        logger.info(f"Using SQLite content store at {store.db_path}")
    if authorizer is None:
        authorizer = TokenAuthorizer.from_config(config)

    font_families = create_font_families_controller(store, authorizer, config)

    app.config["CONTENT_STORE"] = store
    app.config["AUTHORIZER"] = authorizer
    app.config["FONT_FAMILIES_CONTROLLER"] = font_families

    # OPTIONS is answered by the schema routes, not by Flask's default handler
    collection_route = font_families.collection_route
    item_route = f"{collection_route}/<int:font_family_id>"

    @app.route(collection_route, methods=["GET"], provide_automatic_options=False)
    def list_font_families():
        return _respond(font_families.get_items(_build_rest_request()))

    @app.route(collection_route, methods=["POST"], provide_automatic_options=False)
    def create_font_family():
        return _respond(font_families.create_item(_build_rest_request()))

    @app.route(collection_route, methods=["OPTIONS"])
    def describe_font_families():
        return _respond(font_families.get_schema(_build_rest_request()))

    @app.route(item_route, methods=["GET"], provide_automatic_options=False)
    def get_font_family(font_family_id: int):
        return _respond(font_families.get_item(_build_rest_request({"id": font_family_id})))

    @app.route(item_route, methods=["POST", "PUT", "PATCH"], provide_automatic_options=False)
    def update_font_family(font_family_id: int):
        return _respond(font_families.update_item(_build_rest_request({"id": font_family_id})))

    @app.route(item_route, methods=["DELETE"], provide_automatic_options=False)
    def delete_font_family(font_family_id: int):
        return _respond(font_families.delete_item(_build_rest_request({"id": font_family_id})))

    @app.route(item_route, methods=["OPTIONS"])
    def describe_font_family(font_family_id: int):
        return _respond(font_families.get_schema(_build_rest_request({"id": font_family_id})))

    @app.route("/health", methods=["GET"])
    def health_check():
        """Health check endpoint for monitoring and load balancers.

        Returns:
            tuple: (JSON response, 200 status code)

        Example:
            $ curl http://localhost:5000/health
            {"status": "healthy"}
        """
        return jsonify({"status": "healthy"}), 200

    @app.errorhandler(RestError)
    def handle_rest_error(error: RestError):
        logger.warning(f"{request.method} {request.path} rejected: {error.code} ({error.status}) {error.message}")
        return jsonify(error.to_dict()), error.status

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if error.code in (404, 405):
            body = {
                "code": "rest_no_route",
                "message": "No route was found matching the URL and request method.",
                "data": {"status": 404},
            }
            return jsonify(body), 404
        body = {
            "code": "rest_http_error",
            "message": error.description,
            "data": {"status": error.code},
        }
        return jsonify(body), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(f"Unexpected error handling {request.method} {request.path}: {error}", exc_info=True)
        body = {
            "code": "rest_internal_error",
            "message": "Internal server error",
            "data": {"status": 500},
        }
        return jsonify(body), 500

    return app
