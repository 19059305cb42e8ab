from typing import Any, Dict, List, Optional

from flask import current_app

from .api_adapters.base_adapter import BackendError
from .api_adapters.display_backend_adapter import get_selected_backend_adapter
from ..utils.constants import ANNOUNCEMENT_DELIM


def split_announcements(raw: Any) -> List[str]:
    """Splits the stored announcement text into a list, always at least ['']."""
    text = str(raw or '')
    if not text:
        return ['']
    parts = text.split(ANNOUNCEMENT_DELIM) if ANNOUNCEMENT_DELIM in text else [text]
    return parts or ['']


def join_announcements(announcements: Optional[List[str]]) -> str:
    """Joins announcements for storage, dropping blank entries."""
    cleaned = [str(a).strip() for a in (announcements or [])]
    return ANNOUNCEMENT_DELIM.join(a for a in cleaned if a)


def load_masjid_config() -> Optional[Dict[str, Any]]:
    """Returns the masjid config with announcements as a list, or None if none is saved yet."""
    adapter = get_selected_backend_adapter()
    if not adapter:
        raise BackendError("Display backend is not configured.")

    config = adapter.fetch_masjid_config()
    if config is None:
        current_app.logger.info("No masjid config saved yet.")
        return None

    config = dict(config)
    config['announcements'] = split_announcements(config.get('announcements'))
    return config


def save_masjid_config(config_data: Dict[str, Any]) -> Any:
    adapter = get_selected_backend_adapter()
    if not adapter:
        raise BackendError("Display backend is not configured.")

    payload = dict(config_data)
    if isinstance(payload.get('announcements'), list):
        payload['announcements'] = join_announcements(payload['announcements'])

    current_app.logger.info(f"Saving masjid config for '{payload.get('name')}'.")
    return adapter.save_masjid_config(payload)
