# -*- coding: utf-8 -*-
"""
Service for the Iqamaah Range Editor.

Glues the range engine to the display backend:
- Loading: fetches a month in whatever shape the backend returns and
  normalizes it to per-prayer ranges.
- Mutations: validates a range locally, then forwards a create/update/delete
  request. Invalid ranges never reach the backend.
- Errors: backend failures are raised as BackendError, never retried here.
"""

from typing import Any, Dict, Optional

from flask import current_app

from .api_adapters.base_adapter import BackendError
from .api_adapters.display_backend_adapter import get_selected_backend_adapter
from .iqamaah.mutations import plan_create, plan_delete, plan_update
from .iqamaah.payload import normalize
from ..utils.time_utils import month_bounds, shift_month


def _adapter():
    adapter = get_selected_backend_adapter()
    if not adapter:
        raise BackendError("Display backend is not configured.")
    return adapter


def _month_ref(year: int, month: int) -> Dict[str, int]:
    return {'year': year, 'month': month}


def load_month(year: int, month: int) -> Dict[str, Any]:
    """
    Fetches one month of iqamaah times and compresses it for the editor.

    Returns:
        dict: {'year', 'month', 'hasData', 'bounds', 'ranges', 'prev', 'next'}.
              hasData is False when the backend answered 404 or null for the
              month; prev and next are the neighbouring {'year', 'month'}.
    """
    raw = _adapter().fetch_month(year, month)
    ranges = normalize(raw)
    total = sum(len(v) for v in ranges.values())
    current_app.logger.info(f"Loaded iqamaah times for {year}-{month:02d}: {total} ranges.")
    return {
        'year': year,
        'month': month,
        'hasData': raw is not None,
        'bounds': month_bounds(year, month),
        'ranges': ranges,
        'prev': _month_ref(*shift_month(year, month, -1)),
        'next': _month_ref(*shift_month(year, month, 1)),
    }


def create_range(prayer: str, start_date: str, end_date: str, time: str) -> Any:
    request_data = plan_create(prayer, start_date, end_date, time)
    return _adapter().create_range(request_data)


def update_range(prayer: str, original: Optional[Dict[str, Any]], edited: Dict[str, Any]) -> Any:
    request_data = plan_update(prayer, original, edited)
    return _adapter().update_range(request_data)


def delete_range(prayer: str, time_range: Dict[str, Any]) -> Any:
    request_data = plan_delete(prayer, time_range)
    return _adapter().delete_range(request_data)
