# This module contains all functions related to talking to the display backend over HTTP.
import time
from typing import Any, Dict, Optional

import requests
from flask import current_app

from ...metrics import BACKEND_REQUESTS_TOTAL, BACKEND_REQUEST_DURATION_SECONDS
from .base_adapter import BackendError, BaseDisplayBackendAdapter

NO_RESPONSE_MESSAGE = "No response from server. Check if the server is running."


def unwrap(payload: Any) -> Any:
    """Supports common API shapes: plain object, {data: object}, {result: object}."""
    if isinstance(payload, dict):
        if isinstance(payload.get('data'), (dict, list)):
            return payload['data']
        if isinstance(payload.get('result'), (dict, list)):
            return payload['result']
    return payload


def get_error_message(error: requests.exceptions.RequestException) -> str:
    """
    Extracts the most useful message from a failed request: the server's own
    message when it answered, a fixed hint when it never did, the raw text otherwise.
    """
    response = getattr(error, 'response', None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            server_message = body.get('message') or body.get('error')
            if server_message:
                return str(server_message)
        return f"Server Error: {response.status_code}"

    if isinstance(error, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return NO_RESPONSE_MESSAGE

    return str(error) or "An unexpected error occurred"


class DisplayBackendAdapter(BaseDisplayBackendAdapter):
    """
    API Adapter for the masjid display backend (JSON over HTTP).
    """

    name = "DisplayBackendAdapter"

    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

    def fetch_month(self, year: int, month: int) -> Any:
        current_app.logger.info(f"DisplayBackendAdapter: Fetching iqamaah times for {year}-{month:02d}")
        return self._request('GET', '/iqamaah-times/month', params={'year': year, 'month': month}, missing_ok=True)

    def create_range(self, request_data: Dict[str, Any]) -> Any:
        current_app.logger.info(f"DisplayBackendAdapter: Creating {request_data.get('prayer')} range {request_data.get('startDate')}..{request_data.get('endDate')}")
        return self._request('POST', '/iqamaah-times/range', json=request_data)

    def update_range(self, request_data: Dict[str, Any]) -> Any:
        current_app.logger.info(f"DisplayBackendAdapter: Updating {request_data.get('prayer')} range {request_data.get('oldStartDate')}..{request_data.get('oldEndDate')}")
        return self._request('PATCH', '/iqamaah-times/range', json=request_data)

    def delete_range(self, request_data: Dict[str, Any]) -> Any:
        current_app.logger.info(f"DisplayBackendAdapter: Deleting {request_data.get('prayer')} range {request_data.get('startDate')}..{request_data.get('endDate')}")
        return self._request('DELETE', '/iqamaah-times/range', json=request_data)

    def fetch_masjid_config(self) -> Any:
        return self._request('GET', '/masjid-config', missing_ok=True)

    def save_masjid_config(self, config_data: Dict[str, Any]) -> Any:
        # The backend replaces the existing config; POST is used for both create and update.
        return self._request('POST', '/masjid-config', json=config_data)

    def _request(self, method: str, path: str, missing_ok: bool = False, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        current_app.logger.debug(f"DisplayBackendAdapter: {method} {url} {kwargs}")

        started = time.monotonic()
        status = "error"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            if missing_ok and response.status_code == 404:
                status = "not_found"
                current_app.logger.info(f"DisplayBackendAdapter: {method} {path} returned 404, treating as no data.")
                return None
            response.raise_for_status()
            status = "success"
            if not response.content:
                return None
            return unwrap(response.json())
        except requests.exceptions.RequestException as e:
            message = get_error_message(e)
            status_code = e.response.status_code if e.response is not None else None
            current_app.logger.error(f"DisplayBackendAdapter: {method} {path} failed: {message}")
            raise BackendError(message, status_code=status_code) from e
        except ValueError as e:
            current_app.logger.error(f"DisplayBackendAdapter: {method} {path} returned invalid JSON: {e}")
            raise BackendError("Invalid response from server.") from e
        finally:
            BACKEND_REQUESTS_TOTAL.labels(adapter_name=self.name, endpoint=path, status=status).inc()
            BACKEND_REQUEST_DURATION_SECONDS.labels(adapter_name=self.name, endpoint=path).observe(time.monotonic() - started)


def get_selected_backend_adapter() -> Optional[BaseDisplayBackendAdapter]:
    """
    Instantiates and returns the display backend adapter based on configuration.
    """
    adapter_name = current_app.config.get('DISPLAY_BACKEND_ADAPTER', "DisplayBackendAdapter")
    base_url = current_app.config.get('DISPLAY_BACKEND_BASE_URL')
    timeout = current_app.config.get('DISPLAY_BACKEND_TIMEOUT_SECONDS', 10)

    if adapter_name == "DisplayBackendAdapter":
        if not base_url:
            current_app.logger.error("Display backend base URL is not configured.")
            return None
        return DisplayBackendAdapter(base_url=base_url, timeout=timeout)

    current_app.logger.error(f"Unsupported display backend adapter: {adapter_name}")
    return None
