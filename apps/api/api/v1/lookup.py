"""Lookup endpoints for the SA1 customer and Z02 integrated order pickers."""

# flake8: noqa: E501


from flask import Blueprint, current_app, jsonify, request

from apps.api.auth.decorators import login_required
from apps.api.services.dictionary import AliasRecordService

bp = Blueprint("lookup", __name__)


def _records() -> AliasRecordService:
    return current_app.extensions["record_service"]


@bp.route("/<table>", methods=["GET"])
@login_required
async def lookup_table(table: str):
    """
    Search a lookup table.

    Only SA1 and Z02 have lookups; any other table returns an empty list.

    Query Parameters:
        - filter: SA1 matches every column, Z02 matches its code

    Returns:
        200: List of projections

    Example:
        GET /api/isp/lookup/SA1?filter=mock%202
        [{"a1_cod": "000002", "a1_loja": "01", "a1_nome": "Cliente Mock 2"}]
    """
    rows = await _records().lookup(table, request.args.get("filter", ""))
    return jsonify(rows), 200


@bp.route("/<table>/<record_id>", methods=["GET"])
@login_required
async def lookup_by_id(table: str, record_id: str):
    """
    Look up one record by code.

    Returns:
        200: ``[projection]`` when found, ``[]`` otherwise

    Example:
        GET /api/isp/lookup/Z02/INT001
        [{"z02_cod": "INT001", "z02_idped": "PED-1001"}]
    """
    rows = await _records().lookup_by_id(table, record_id)
    return jsonify(rows), 200
