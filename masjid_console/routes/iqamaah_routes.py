# masjid_console/routes/iqamaah_routes.py

import datetime
from typing import Any, Dict

from flask import current_app
from flask_smorest import Blueprint, abort

from ..schemas import (
    IqamaahMonthSchema,
    MessageSchema,
    MonthQuerySchema,
    RangeCreateSchema,
    RangeDeleteSchema,
    RangeMutationResultSchema,
    RangeUpdateSchema,
)
from ..services import iqamaah_service
from ..services.api_adapters.base_adapter import BackendError
from ..services.iqamaah.mutations import RangeValidationError

iqamaah_bp = Blueprint(
    'Iqamaah',
    __name__,
    url_prefix='/api/iqamaah-times',
    description="Read and edit per-prayer iqamaah ranges for a month."
)


def _backend_failed(e: BackendError, action: str):
    current_app.logger.error(f"Iqamaah {action} failed at the display backend: {e.message}")
    abort(502, message=e.message)


@iqamaah_bp.route('/month')
@iqamaah_bp.arguments(MonthQuerySchema, location='query')
@iqamaah_bp.response(200, IqamaahMonthSchema, description="Ranges per prayer for the month.")
@iqamaah_bp.alt_response(502, schema=MessageSchema, description="The display backend could not be reached or returned an error.")
def get_month(args: Dict[str, Any]):
    """
    Get the iqamaah ranges of one month.

    Daily records returned by the backend are compressed into contiguous ranges;
    pre-aggregated ranges are normalized. Defaults to the current month.
    """
    today = datetime.date.today()
    year = args.get('year', today.year)
    month = args.get('month', today.month)

    try:
        return iqamaah_service.load_month(year, month)
    except BackendError as e:
        _backend_failed(e, "load")


@iqamaah_bp.route('/range', methods=['POST'])
@iqamaah_bp.arguments(RangeCreateSchema)
@iqamaah_bp.response(201, RangeMutationResultSchema, description="Range saved.")
@iqamaah_bp.alt_response(400, schema=MessageSchema, description="The range is invalid; nothing was sent to the backend.")
@iqamaah_bp.alt_response(502, schema=MessageSchema)
def create_range(args: Dict[str, Any]):
    """Add a range for one prayer."""
    try:
        result = iqamaah_service.create_range(args['prayer'], args['startDate'], args['endDate'], args['time'])
    except RangeValidationError as e:
        abort(400, message=e.message)
    except BackendError as e:
        _backend_failed(e, "create")
    return {"message": "Range saved", "result": result}


@iqamaah_bp.route('/range', methods=['PATCH'])
@iqamaah_bp.arguments(RangeUpdateSchema)
@iqamaah_bp.response(200, RangeMutationResultSchema, description="Range updated.")
@iqamaah_bp.alt_response(400, schema=MessageSchema)
@iqamaah_bp.alt_response(502, schema=MessageSchema)
def update_range(args: Dict[str, Any]):
    """
    Replace a range.

    `original` is the range as it was loaded and keys the replacement;
    `edited` is always sent in full.
    """
    try:
        result = iqamaah_service.update_range(args['prayer'], args.get('original'), args['edited'])
    except RangeValidationError as e:
        abort(400, message=e.message)
    except BackendError as e:
        _backend_failed(e, "update")
    return {"message": "Range updated", "result": result}


@iqamaah_bp.route('/range', methods=['DELETE'])
@iqamaah_bp.arguments(RangeDeleteSchema)
@iqamaah_bp.response(200, RangeMutationResultSchema, description="Range deleted.")
@iqamaah_bp.alt_response(400, schema=MessageSchema)
@iqamaah_bp.alt_response(502, schema=MessageSchema)
def delete_range(args: Dict[str, Any]):
    """Delete a range. For Jumuah the time picks the slot."""
    prayer = args.pop('prayer')
    try:
        result = iqamaah_service.delete_range(prayer, args)
    except RangeValidationError as e:
        abort(400, message=e.message)
    except BackendError as e:
        _backend_failed(e, "delete")
    return {"message": "Range deleted", "result": result}
