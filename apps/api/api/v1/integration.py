"""Integration resource endpoints: platforms, shipping programs, marketplace accounts,
product x account bindings and integrated order details."""

# flake8: noqa: E501


from flask import Blueprint, current_app, jsonify, request

from apps.api.auth.decorators import login_required
from apps.api.services.dictionary import (
    MARKETPLACE_ACCOUNTS,
    PLATFORMS,
    SHIPPING_PROGRAMS,
    AliasRecordService,
    RecordResource,
)
from apps.api.services.dictionary.query_engine import BrowseParams
from shared.api_utils import get_request_payload

bp = Blueprint("integration", __name__)


def _records() -> AliasRecordService:
    return current_app.extensions["record_service"]


async def _list(resource: RecordResource):
    params = BrowseParams.from_args(request.args, order_keys=("order", "$order"))
    return jsonify(await _records().list_records(resource, params)), 200


async def _create(resource: RecordResource):
    return jsonify(await _records().create_record(resource, get_request_payload())), 201


async def _update(resource: RecordResource, record_id: str):
    return jsonify(await _records().update_record(resource, record_id, get_request_payload())), 200


async def _delete(resource: RecordResource, record_id: str):
    await _records().delete_record(resource, record_id)
    return "", 204


# ==================== Platforms (Z10) ====================


@bp.route("/platforms", methods=["GET"])
@login_required
async def list_platforms():
    """
    List platforms.

    Query Parameters:
        - page, pageSize, filter
        - order: e.g. "Z10_DESC,-Z10_COD"

    Returns:
        200: {hasNext, total, items}
    """
    return await _list(PLATFORMS)


@bp.route("/platforms", methods=["POST"])
@login_required
async def create_platform():
    """
    Create a platform.

    Z10_COD is generated as PLATnnn when omitted; Z10_DTALT is stamped with
    today's date.

    Returns:
        201: Created platform
    """
    return await _create(PLATFORMS)


@bp.route("/platforms/<record_id>", methods=["PUT"])
@login_required
async def update_platform(record_id: str):
    """
    Update a platform, merging the payload over the stored row.

    Returns:
        200: Updated platform
        404: Platform not found
    """
    return await _update(PLATFORMS, record_id)


@bp.route("/platforms/<record_id>", methods=["DELETE"])
@login_required
async def delete_platform(record_id: str):
    """
    Delete a platform.

    Returns:
        204: Deleted
        404: Platform not found
    """
    return await _delete(PLATFORMS, record_id)


# ==================== Shipping programs (Z11) ====================


@bp.route("/shipping/program", methods=["GET"])
@login_required
async def list_shipping_programs():
    """List shipping programs as {hasNext, total, items}."""
    return await _list(SHIPPING_PROGRAMS)


@bp.route("/shipping/program", methods=["POST"])
@login_required
async def create_shipping_program():
    """Create a shipping program; Z11_COD defaults to ENVnnn."""
    return await _create(SHIPPING_PROGRAMS)


@bp.route("/shipping/program/<record_id>", methods=["PUT"])
@login_required
async def update_shipping_program(record_id: str):
    return await _update(SHIPPING_PROGRAMS, record_id)


@bp.route("/shipping/program/<record_id>", methods=["DELETE"])
@login_required
async def delete_shipping_program(record_id: str):
    return await _delete(SHIPPING_PROGRAMS, record_id)


# ==================== Marketplace accounts (Z00) ====================


@bp.route("/marketplaces/accounts", methods=["GET"])
@login_required
async def list_marketplace_accounts():
    """List marketplace accounts as {hasNext, total, items}."""
    return await _list(MARKETPLACE_ACCOUNTS)


@bp.route("/marketplaces/accounts", methods=["POST"])
@login_required
async def create_marketplace_account():
    """Create a marketplace account; Z00_COD defaults to ACCnnn."""
    return await _create(MARKETPLACE_ACCOUNTS)


@bp.route("/marketplaces/accounts/<record_id>", methods=["PUT"])
@login_required
async def update_marketplace_account(record_id: str):
    return await _update(MARKETPLACE_ACCOUNTS, record_id)


@bp.route("/marketplaces/accounts/<record_id>", methods=["DELETE"])
@login_required
async def delete_marketplace_account(record_id: str):
    return await _delete(MARKETPLACE_ACCOUNTS, record_id)


# ==================== Product x account bindings (Z01) ====================


@bp.route("/productxaccounts", methods=["POST"])
@login_required
async def save_product_bindings():
    """
    Save product x account bindings.

    Request Body:
        {"Z01_PRDERP": "PRD001", "Z01_DESCER": "...", "ITENS": [{"Z01_CONTA": "ACC001", "Z01_SKU": "..."}]}

    With ITENS, every binding of the product is replaced. Without it, one row
    is appended.

    Returns:
        201: {"success": true}
        400: ITENS without Z01_PRDERP
    """
    result = await _records().save_product_bindings(get_request_payload())
    return jsonify(result), 201


@bp.route("/productxaccounts/<product>", methods=["GET"])
@login_required
async def get_product_bindings(product: str):
    """
    Get the bindings of one ERP product.

    Returns:
        200: {"items": [...]}
    """
    return jsonify(await _records().get_product_bindings(product)), 200


@bp.route("/productxaccounts/<product>", methods=["DELETE"])
@login_required
async def delete_product_bindings(product: str):
    """
    Delete every binding of one ERP product.

    Returns:
        204: Deleted
        404: Product has no bindings
    """
    await _records().delete_product_bindings(product)
    return "", 204


# ==================== Integrated orders ====================


@bp.route("/integratedorders/<id_ped>/<id_int>", methods=["GET"])
@login_required
async def get_integrated_order(id_ped: str, id_int: str):
    """
    Get items, payments and invoices of one integrated order.

    Returns:
        200: {"Z03": [...], "Z05": [...], "Z06": [...]}

    Example:
        GET /api/isp/integratedorders/PED-1001/I1001
    """
    return jsonify(await _records().integrated_order_details(id_ped, id_int)), 200
