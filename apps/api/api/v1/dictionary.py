"""Data dictionary API endpoints: schema introspection, generic browse and form helpers."""

# flake8: noqa: E501


from flask import Blueprint, current_app, jsonify, request

from apps.api.auth.decorators import login_required
from apps.api.services.dictionary import DictionaryService
from apps.api.services.dictionary.query_engine import BrowseParams

bp = Blueprint("dictionary", __name__)


def _service() -> DictionaryService:
    return current_app.extensions["dictionary_service"]


@bp.route("/browse/columns/<alias>", methods=["GET"])
@login_required
async def browse_columns(alias: str):
    """
    Get the full schema of an alias.

    Path Parameters:
        - alias: Alias code (e.g. Z10)

    Returns:
        200: AliasSchema {description, struct, folders, agrups}
        404: Alias not found

    Example:
        GET /api/isp/dictionary/browse/columns/Z10
    """
    schema = await _service().get_schema(alias)
    return jsonify(schema), 200


@bp.route("/browse/items/<alias>", methods=["GET"])
@login_required
async def browse_items(alias: str):
    """
    Page through the rows of an alias.

    Query Parameters:
        - page: Page number (default: 1)
        - pageSize: Rows per page (default: 10)
        - filter: Case-insensitive text matched against every column
        - $order: Order spec, e.g. "Z10_DESC DESC" or "-Z10_COD,Z10_DESC"

    Returns:
        200: {hasNext, remainingRecords, items}

    Example:
        GET /api/isp/dictionary/browse/items/Z10?page=1&pageSize=10&$order=Z10_COD%20DESC
    """
    params = BrowseParams.from_args(request.args)
    page = await _service().browse_items(alias, params)
    return jsonify(page), 200


@bp.route("/struct/<alias>", methods=["GET"])
@login_required
async def get_struct(alias: str):
    """
    Get the schema of an alias for form rendering.

    Returns:
        200: AliasSchema
        404: Alias not found
    """
    schema = await _service().get_schema(alias)
    return jsonify(schema), 200


@bp.route("/data/<alias>/<path:item>", methods=["GET"])
@login_required
async def get_positioned(alias: str, item: str):
    """
    Get the record a UI cursor points at.

    The last path segment is a URL-encoded JSON payload, optionally wrapping
    the record in an ``item`` key. Falls back to the first row when no row
    matches, and to ``{}`` when the alias has no rows.

    Example:
        GET /api/isp/dictionary/data/Z10/%7B%22item%22%3A%7B%22Z10_COD%22%3A%22PLAT002%22%7D%7D
    """
    record = await _service().positioned(alias, item)
    return jsonify(record), 200


@bp.route("/initializer/<alias>", methods=["GET"])
@login_required
async def get_initializer(alias: str):
    """
    Get a blank record with schema defaults.

    Returns:
        200: One key per schema field, in struct order
        404: Alias not found
    """
    record = await _service().initializer(alias)
    return jsonify(record), 200


@bp.route("/trigger/<field>", methods=["POST"])
@login_required
async def run_trigger(field: str):
    """
    Run a field trigger.

    Triggers echo the (FORM-unwrapped) form back so the UI keeps its state.
    """
    return jsonify(DictionaryService.trigger(field, request.get_json(silent=True))), 200


@bp.route("/sync", methods=["POST"])
@login_required
async def sync_schemas():
    """
    Upsert alias schemas.

    Request Body (one of, first wins):
        {"aliasSchemas": {"Z10": {description, struct, folders, agrups}}}
        {"schemas": [{"alias": "Z10", description, struct, folders, agrups}]}
        {"useSeed": true}

    Returns:
        200: {success, synced, aliases: [{alias, fields, folders, agrups}]}
        400: No schema source or malformed schema
        500: Storage failure (earlier aliases stay committed)
    """
    result = await _service().sync(request.get_json(silent=True))
    return jsonify(result), 200
